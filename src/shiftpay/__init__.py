"""Shift pay calculation and tax withholding engine."""

__version__ = "0.1.0"
