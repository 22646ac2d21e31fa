"""Exceptions raised by snpspec."""


class SnpspecError(Exception):
    """Base class for errors that abort a snpspec run."""
    pass


class InputUnavailableError(SnpspecError, FileNotFoundError):
    """A required input file could not be found or opened."""
    pass


class MalformedInputError(SnpspecError, ValueError):
    """An input file is structurally inconsistent."""
    pass


class ConfigurationError(SnpspecError, ValueError):
    """Inputs or parameters cannot produce a meaningful test."""
    pass
