"""
Exception types raised by relurls.

Storage failures are not wrapped: both storage backends raise the built-in
FileNotFoundError / NotADirectoryError / IsADirectoryError family.
"""


class RelUrlsError(Exception):
    """Base class for relurls errors."""


class ConfigurationError(RelUrlsError):
    """A settings file could not be read or parsed."""
