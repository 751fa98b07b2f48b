"""Data models for the tagging pipeline."""

from dataclasses import dataclass, field
from typing import Optional

# Tags are opaque identifiers from the tagger's tagset.
Tag = str


@dataclass(frozen=True)
class Sentence:
    """A contiguous span of a larger document submitted for tagging."""

    text: str
    origin_start: int = 0
    origin_end: Optional[int] = None

    def __post_init__(self):
        """Fill in origin_end and check the span matches the text."""
        if self.origin_end is None:
            object.__setattr__(self, "origin_end", self.origin_start + len(self.text))
        if self.origin_start < 0:
            raise ValueError(f"Negative sentence start: {self.origin_start}")
        if self.origin_end - self.origin_start != len(self.text):
            raise ValueError(
                f"Sentence bounds [{self.origin_start}, {self.origin_end}) "
                f"do not match text length {len(self.text)}"
            )

    @classmethod
    def from_document(cls, document: str, start: int, end: int) -> "Sentence":
        """Create a Sentence from document bounds."""
        return cls(text=document[start:end], origin_start=start, origin_end=end)


@dataclass(frozen=True)
class Token:
    """A whitespace-delimited unit of tokenizer output."""

    surface: str
    position: int


@dataclass(frozen=True)
class TaggedSpan:
    """A tag bound to a character range of the untokenized text."""

    start: int
    end: int
    tag: Tag

    def __post_init__(self):
        if self.start < 0 or self.start >= self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def shift(self, offset: int) -> "TaggedSpan":
        """Move the span by offset, e.g. into document coordinates."""
        return TaggedSpan(self.start + offset, self.end + offset, self.tag)

    def text(self, source: str) -> str:
        """Return the covered text of source."""
        return source[self.start:self.end]


@dataclass
class SentenceResult:
    """Outcome of tagging one sentence in a batch.

    Failed sentences carry the error and never any spans.
    """

    sentence: Sentence
    spans: list[TaggedSpan] = field(default_factory=list)
    error: Optional[Exception] = None

    def __post_init__(self):
        if self.error is not None:
            self.spans = []

    @property
    def ok(self) -> bool:
        return self.error is None

    def document_spans(self) -> list[TaggedSpan]:
        """Spans shifted into document coordinates."""
        return [span.shift(self.sentence.origin_start) for span in self.spans]
