"""Session credential subsystem for the bank client."""

__version__ = "0.1.0"
