"""EventGate: HTTP ingestion gateway for batches of domain events."""

__version__ = "1.0.0"
