"""Core event processing for the gateway."""
