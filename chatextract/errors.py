"""Extractor exception hierarchy."""


class ExtractorError(Exception):
    """Base class for extractor errors."""
    pass

class UnknownCommandError(ExtractorError):
    """A command name that is not in the configured command list."""
    pass

class HookUnavailableError(ExtractorError):
    """The host service does not expose a usable subscription hook."""
    pass
