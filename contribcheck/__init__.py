"""contribcheck: validate contributor record files against the project registry."""

__version__ = "0.1.0"
