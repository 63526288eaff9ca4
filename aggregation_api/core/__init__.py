"""Core layer - domain model and input validation."""
