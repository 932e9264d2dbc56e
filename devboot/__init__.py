"""devboot — idempotent developer-environment bootstrap."""

__version__ = "0.1.0"
