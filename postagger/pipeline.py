"""Main tagging pipeline."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .aligner import align
from .boundaries import BoundaryProvider
from .config import Config
from .errors import ConfigurationError, TaggingError
from .models import Sentence, SentenceResult, TaggedSpan
from .session import SessionManager
from .tokenizer import request_line

logger = logging.getLogger(__name__)


def filter_spans(spans: Iterable[TaggedSpan], tags: Iterable[str]) -> list[TaggedSpan]:
    """Keep spans whose tag is one of tags."""
    wanted = set(tags)
    return [span for span in spans if span.tag in wanted]


class TaggingPipeline:
    """Tokenize, tag and align sentences with an external tagger.

    Tagger processes are started lazily per language and kept running
    until close().
    """

    def __init__(self, config: Config, sessions: Optional[SessionManager] = None):
        """Initialize tagging pipeline.

        Args:
            config: Pipeline configuration
            sessions: Session manager to use; one is created from config if None
        """
        self.config = config
        self.sessions = sessions if sessions is not None else SessionManager(config.tagger)

    def __enter__(self) -> "TaggingPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut down all tagger sessions."""
        self.sessions.shutdown_all()

    def resolve_profile(
        self, language: str, profile_path: Optional[str | Path] = None
    ) -> Path:
        """Find the tagger profile for a language.

        Raises:
            ConfigurationError: If the language has no profile
        """
        if profile_path is not None:
            return Path(profile_path)
        profile = self.config.profile_for(language)
        if profile is None:
            raise ConfigurationError(
                f"Tagging is not supported for language {language!r}: no profile configured",
                language,
            )
        return profile

    def tag_sentence(
        self,
        sentence: Sentence,
        language: str,
        profile_path: Optional[str | Path] = None,
    ) -> list[TaggedSpan]:
        """
        Tag a single sentence.

        Args:
            sentence: Sentence to tag
            language: Language key selecting the tagger session
            profile_path: Profile overriding the configured one

        Returns:
            Spans relative to sentence.text; add sentence.origin_start
            (or use SentenceResult.document_spans) for document coordinates

        Raises:
            TaggingError: Any error of the tokenize/tag/align chain
        """
        profile = self.resolve_profile(language, profile_path)
        line = request_line(sentence.text)
        if not line:
            return []

        self.sessions.ensure_ready(language, profile)
        pairs = self.sessions.submit(language, line)
        return align(sentence.text, pairs)

    def tag_document(
        self,
        sentences: Iterable[Sentence],
        language: str,
        profile_path: Optional[str | Path] = None,
        stop_on_error: bool = False,
    ) -> Iterator[SentenceResult]:
        """
        Tag a sequence of sentences lazily, in order.

        A failing sentence yields a SentenceResult carrying the error and no
        spans; the remaining sentences are still tagged unless stop_on_error.

        Raises:
            ConfigurationError: If the language has no profile
            TaggingError: The first per-sentence error, if stop_on_error
        """
        profile = self.resolve_profile(language, profile_path)
        for sentence in sentences:
            try:
                spans = self.tag_sentence(sentence, language, profile)
            except ConfigurationError:
                raise
            except TaggingError as e:
                if stop_on_error:
                    raise
                logger.warning(
                    "Tagging failed for sentence at %d-%d: %s",
                    sentence.origin_start,
                    sentence.origin_end,
                    e,
                )
                yield SentenceResult(sentence=sentence, error=e)
                continue
            yield SentenceResult(sentence=sentence, spans=spans)

    def tag_text(
        self,
        document: str,
        language: str,
        boundaries: BoundaryProvider,
        profile_path: Optional[str | Path] = None,
        stop_on_error: bool = False,
    ) -> Iterator[SentenceResult]:
        """Tag every sentence the boundary provider finds in a document."""
        return self.tag_document(
            boundaries.sentences(document),
            language,
            profile_path=profile_path,
            stop_on_error=stop_on_error,
        )

    def tag_at(
        self,
        document: str,
        offset: int,
        language: str,
        boundaries: BoundaryProvider,
        profile_path: Optional[str | Path] = None,
    ) -> list[TaggedSpan]:
        """Tag the sentence containing offset; spans in document coordinates."""
        sentence = boundaries.sentence_at(document, offset)
        spans = self.tag_sentence(sentence, language, profile_path)
        return [span.shift(sentence.origin_start) for span in spans]

    def tag_word_at(
        self,
        document: str,
        offset: int,
        language: str,
        boundaries: BoundaryProvider,
        profile_path: Optional[str | Path] = None,
    ) -> list[TaggedSpan]:
        """Tag spans, in document coordinates, overlapping the word at offset."""
        word_start, word_end = boundaries.word_at(document, offset)
        if word_start >= word_end:
            return []
        spans = self.tag_at(document, offset, language, boundaries, profile_path)
        return [span for span in spans if span.start < word_end and span.end > word_start]
