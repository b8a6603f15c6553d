"""Redis-backed switch state database access: configuration, connectors, notification consumer, field-value JSON and network address types."""

__version__ = "0.1.0"