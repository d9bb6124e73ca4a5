"""
codedump - concatenate a source tree into a single text file.
"""

__version__ = "0.1.0"
