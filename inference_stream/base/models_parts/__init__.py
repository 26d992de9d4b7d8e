"""One-class-per-file domain model implementations."""
