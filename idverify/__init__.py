"""Request identity verification against a remote identity authority."""

__version__ = "0.1.0"
