"""Threaded Monte Carlo estimation with adaptive error-based stopping."""

__version__ = "0.1.0"
