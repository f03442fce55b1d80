"""
Core conversion logic: format adapters, XLIFF reconciliation and the
per-artifact converter.
"""
