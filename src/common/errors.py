# ABOUTME: Declares the error raised when callers hand the participation engine bad input.
# ABOUTME: Subclasses ValueError so existing ValueError handlers keep working.


class InvalidArgumentError(ValueError):
    """Raised synchronously for absent collections, bad thresholds, or invalid record fields."""
