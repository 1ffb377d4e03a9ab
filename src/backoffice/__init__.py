"""SafeTap backoffice domain logic."""

__version__ = "0.1.0"
