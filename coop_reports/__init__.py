"""Loan portfolio reporting for a financial cooperative."""

__version__ = "0.1.0"
