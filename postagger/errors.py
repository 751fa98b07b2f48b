"""Exceptions raised by the tagging pipeline.

Library code raises these; the CLI maps them to exit codes.
"""

from typing import Optional


class TaggingError(Exception):
    """Base class for all tagging errors."""


class ConfigurationError(TaggingError):
    """No usable tagger profile is configured for the requested language."""

    def __init__(self, message: str, language: Optional[str] = None):
        self.language = language
        super().__init__(message)


class ProcessSpawnError(TaggingError):
    """The tagger executable could not be launched or exited during startup."""

    def __init__(self, message: str, language: Optional[str] = None):
        self.language = language
        super().__init__(message)


class ProcessTerminatedError(ProcessSpawnError):
    """The tagger process went away while a session was using it."""


class TaggerError(TaggingError):
    """A request to a running tagger session failed."""

    def __init__(self, message: str, language: Optional[str] = None):
        self.language = language
        super().__init__(message)


class TaggerTimeoutError(TaggerError):
    """No complete response arrived within the configured timeout."""


class TaggerProtocolError(TaggerError):
    """Output arrived but did not follow the line protocol."""


class MalformedOutputError(TaggerProtocolError):
    """An output unit has no surface/tag separator."""

    def __init__(self, unit: str, language: Optional[str] = None):
        self.unit = unit
        super().__init__(f"Malformed tagger output unit: {unit!r}", language)


class SessionBusyError(TaggerError):
    """Another request is already in flight on the same session."""


class SessionNotReadyError(TaggerError):
    """A request was submitted for a language with no running session."""


class AlignmentError(TaggingError):
    """A tagged surface cannot be located in the original sentence."""

    def __init__(self, surface: str, sentence: str, cursor: int = 0):
        self.surface = surface
        self.sentence = sentence
        self.cursor = cursor
        super().__init__(
            f"Cannot align token {surface!r} at or after offset {cursor} "
            f"in sentence {sentence!r}"
        )
