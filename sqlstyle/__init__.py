"""PostgreSQL style guide checker and fixer."""

__version__ = "0.1.0"
