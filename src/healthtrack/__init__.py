"""Diet and exercise goal calculations with weekly trend statistics."""

__version__ = "0.1.0"
