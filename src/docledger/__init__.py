"""Multi-party document signing ledger."""

__version__ = "1.0.0"
