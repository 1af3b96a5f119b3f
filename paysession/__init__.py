"""Backend proxy that creates payment-provider sessions with server-held credentials."""

__version__ = "1.0.0"
