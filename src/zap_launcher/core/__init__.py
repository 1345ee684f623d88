"""Core utilities shared across zap-launcher."""
