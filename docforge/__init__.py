"""docforge — scaffold documentation sites and keep them in sync with their templates."""

__version__ = "0.3.0"
