"""Documents module - Metadata of supporting documents attached to applications."""
