"""ELC Library - circulation and pedagogy assistant for an English Language Centre."""

__version__ = "0.1.0"
