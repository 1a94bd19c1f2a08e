"""Authentication and rate limiting."""
