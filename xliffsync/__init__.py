"""
xliff-sync: keeps XLIFF translation memory in step with .NET source artifacts.
"""

__version__ = "1.0.0"
