"""Energy aggregation API package."""
