"""Implementation parts for cooperative cancellation."""
