"""Sentence and word boundary providers.

Boundary detection belongs to the host (an editor, a document model).
The pipeline only consumes the BoundaryProvider interface;
PunctuationBoundaryProvider is a plain-text stand-in used by the CLI.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterator

from .models import Sentence


class BoundaryProvider(ABC):
    """Base class for sentence/word boundary providers."""

    @abstractmethod
    def sentences(self, document: str) -> Iterator[Sentence]:
        """Lazily enumerate the sentences of a document, in order.

        Args:
            document: Full document text

        Yields:
            Sentence objects in document order
        """
        pass

    def sentence_at(self, document: str, offset: int) -> Sentence:
        """Return the sentence containing a character offset.

        An offset in the gap between two sentences belongs to the
        following sentence; past the last one, to the last sentence.

        Raises:
            ValueError: If the document has no sentences
        """
        last = None
        for sentence in self.sentences(document):
            if offset < sentence.origin_end:
                return sentence
            last = sentence
        if last is None:
            raise ValueError("Document contains no sentences")
        return last

    @abstractmethod
    def word_at(self, document: str, offset: int) -> tuple[int, int]:
        """Return the [start, end) bounds of the word containing offset."""
        pass


class PunctuationBoundaryProvider(BoundaryProvider):
    """Split plain text at sentence-final punctuation and blank lines."""

    def __init__(self):
        # Terminal marks, optional closing quotes/brackets, then whitespace or end
        self.sentence_end_pattern = re.compile(r"[.!?]+[\"'»)\]]*(?=\s|$)|\n\s*\n")
        self.word_pattern = re.compile(r"[\w'-]+")

    def _trimmed(self, document: str, start: int, end: int) -> tuple[int, int]:
        while start < end and document[start].isspace():
            start += 1
        while end > start and document[end - 1].isspace():
            end -= 1
        return start, end

    def sentences(self, document: str) -> Iterator[Sentence]:
        """Yield sentences with surrounding whitespace trimmed from bounds."""
        cursor = 0
        for match in self.sentence_end_pattern.finditer(document):
            start, end = self._trimmed(document, cursor, match.end())
            if start < end:
                yield Sentence.from_document(document, start, end)
            cursor = match.end()

        start, end = self._trimmed(document, cursor, len(document))
        if start < end:
            yield Sentence.from_document(document, start, end)

    def word_at(self, document: str, offset: int) -> tuple[int, int]:
        """Return bounds of the word at offset, or an empty range if none."""
        for match in self.word_pattern.finditer(document):
            if match.start() <= offset < match.end():
                return match.start(), match.end()
            if match.start() > offset:
                break
        return offset, offset
