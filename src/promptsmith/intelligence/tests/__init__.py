"""
Tests for the prompt intelligence pipeline

Covers intent detection, confidence helpers, pattern selection and
ordering, the pattern leaves, quality assessment and the optimizer.
"""
