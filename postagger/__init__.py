"""postagger - Tag text spans with an external part-of-speech tagger."""

__version__ = "0.1.0"

from .aligner import align
from .boundaries import BoundaryProvider, PunctuationBoundaryProvider
from .config import Config, OutputConfig, TaggerConfig, get_default_config, load_config
from .errors import (
    AlignmentError,
    ConfigurationError,
    MalformedOutputError,
    ProcessSpawnError,
    ProcessTerminatedError,
    SessionBusyError,
    SessionNotReadyError,
    TaggerError,
    TaggerProtocolError,
    TaggerTimeoutError,
    TaggingError,
)
from .models import Sentence, SentenceResult, Tag, TaggedSpan, Token
from .parser import parse
from .pipeline import TaggingPipeline, filter_spans
from .session import SessionManager, SessionState, TaggerSession
from .tokenizer import request_line, split_tokens, tokenize

__all__ = [
    "align",
    "parse",
    "tokenize",
    "split_tokens",
    "request_line",
    "filter_spans",
    "TaggingPipeline",
    "SessionManager",
    "SessionState",
    "TaggerSession",
    "BoundaryProvider",
    "PunctuationBoundaryProvider",
    "Config",
    "TaggerConfig",
    "OutputConfig",
    "load_config",
    "get_default_config",
    "Sentence",
    "SentenceResult",
    "Tag",
    "TaggedSpan",
    "Token",
    "TaggingError",
    "ConfigurationError",
    "ProcessSpawnError",
    "ProcessTerminatedError",
    "TaggerError",
    "TaggerTimeoutError",
    "TaggerProtocolError",
    "MalformedOutputError",
    "SessionBusyError",
    "SessionNotReadyError",
    "AlignmentError",
]
