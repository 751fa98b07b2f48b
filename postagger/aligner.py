"""Alignment of tagger tokens onto the original sentence text."""

import logging
from typing import Iterable

from .errors import AlignmentError
from .models import Tag, TaggedSpan

logger = logging.getLogger(__name__)


def align(
    original_sentence: str, tagged_tokens: Iterable[tuple[str, Tag]]
) -> list[TaggedSpan]:
    """
    Locate every tagged surface in the untokenized sentence.

    Walks the sentence with a cursor, searching each surface forward from
    the end of the previous one and taking the leftmost match. Tokenization
    only inserts whitespace, so every surface must be found in order.

    Args:
        original_sentence: Sentence text before tokenization
        tagged_tokens: Ordered (surface, tag) pairs from the tagger

    Returns:
        Spans relative to original_sentence, strictly increasing

    Raises:
        AlignmentError: If a surface cannot be found at or after the cursor.
            No spans are returned for the sentence in that case.
    """
    spans = []
    cursor = 0
    for surface, tag in tagged_tokens:
        if not surface:
            raise AlignmentError(surface, original_sentence, cursor)
        start = original_sentence.find(surface, cursor)
        if start == -1:
            raise AlignmentError(surface, original_sentence, cursor)
        end = start + len(surface)
        spans.append(TaggedSpan(start, end, tag))
        cursor = end

    logger.debug("Aligned %d tokens in sentence of length %d", len(spans), len(original_sentence))
    return spans
