"""PersonBase: person record manager with per-database custom schemas."""

__version__ = "0.1.0"
