"""chatextract — pull tagged sections out of model replies and render them as chat commands."""

__version__ = "0.3.1"
