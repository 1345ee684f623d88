"""zap-launcher - provisions and supervises the Zap language server."""

__version__ = "0.1.0"
