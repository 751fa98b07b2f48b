"""Tokenization of sentences into the form the external tagger expects."""

import re

from .models import Token


class TaggerTokenizer:
    """Split punctuation off words by inserting whitespace.

    The transformation only ever inserts spaces, so every token of the
    output appears, in order, in the original text.
    """

    # Sentence punctuation, kept attached after a digit ("3.14", "1,5")
    CLAUSE_MARKS = ".,:;"
    APOSTROPHE = "'"
    # Always separated on both sides
    ENCLOSING_MARKS = '()!?"«»'

    _PATTERN = re.compile(
        rf"(?<!\d)([{re.escape(CLAUSE_MARKS)}])"
        rf"|(?<!\d)({APOSTROPHE})"
        rf"|([{re.escape(ENCLOSING_MARKS)}])"
    )

    @classmethod
    def _replace(cls, match: re.Match) -> str:
        clause, apostrophe, enclosing = match.groups()
        if apostrophe:
            return f" {apostrophe}"
        return f" {clause or enclosing} "

    @classmethod
    def tokenize(cls, text: str) -> str:
        """
        Insert whitespace around punctuation.

        - ``. , : ;`` not preceded by a digit get a space on both sides
        - ``'`` not preceded by a digit gets a leading space only
        - ``( ) ! ? " « »`` get a space on both sides
        - everything else, including original whitespace, is unchanged

        Args:
            text: Original sentence text

        Returns:
            Tokenized text
        """
        if not text:
            return text
        return cls._PATTERN.sub(cls._replace, text)

    @classmethod
    def split_tokens(cls, tokenized: str) -> list[Token]:
        """Split tokenized text into positioned tokens."""
        return [Token(surface, idx) for idx, surface in enumerate(tokenized.split())]

    @classmethod
    def request_line(cls, text: str) -> str:
        """
        Build the single protocol line sent to the tagger for a sentence.

        Newlines and runs of whitespace inside the sentence collapse to one
        space so the request stays on one line.
        """
        return " ".join(cls.tokenize(text).split())


def tokenize(text: str) -> str:
    """Convenience function for tokenizing a sentence."""
    return TaggerTokenizer.tokenize(text)


def split_tokens(tokenized: str) -> list[Token]:
    """Convenience function for splitting tokenized text."""
    return TaggerTokenizer.split_tokens(tokenized)


def request_line(text: str) -> str:
    """Convenience function for building a tagger request line."""
    return TaggerTokenizer.request_line(text)
