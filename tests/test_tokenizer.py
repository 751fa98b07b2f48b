"""Tests for the tokenizer."""

import pytest

from postagger.models import Token
from postagger.tokenizer import TaggerTokenizer, request_line, split_tokens, tokenize


class TestTokenize:
    """Tests for the punctuation rules."""

    def test_sentence_final_period(self):
        """A period after a word is split off."""
        assert tokenize("The dog runs.").split() == ["The", "dog", "runs", "."]

    def test_clause_marks_get_both_spaces(self):
        assert tokenize("a,b") == "a , b"
        assert tokenize("a;b:c") == "a ; b : c"

    def test_apostrophe_gets_leading_space_only(self):
        """Don't go! -> Don 't go !"""
        assert tokenize("Don't go!") == "Don 't go ! "
        assert tokenize("Don't go!").split() == ["Don", "'t", "go", "!"]

    def test_enclosing_marks(self):
        tokens = tokenize('He said ("yes")?').split()
        assert tokens == ["He", "said", "(", '"', "yes", '"', ")", "?"]

    def test_angled_quotes(self):
        assert tokenize("«Bonjour»").split() == ["«", "Bonjour", "»"]

    @pytest.mark.parametrize("text", ["3.14", "1,000", "12:30", "2;3"])
    def test_digits_keep_punctuation_attached(self, text):
        """Numeric literals are not split."""
        assert tokenize(text) == text

    def test_apostrophe_after_digit(self):
        assert tokenize("the 90's") == "the 90's"

    def test_enclosing_marks_split_after_digits(self):
        """The digit guard only applies to . , : ; and the apostrophe."""
        assert tokenize("(1)").split() == ["(", "1", ")"]

    def test_whitespace_preserved(self):
        assert tokenize("a  b\tc") == "a  b\tc"

    def test_empty(self):
        assert tokenize("") == ""

    def test_only_inserts_whitespace(self):
        """Removing whitespace from the output gives back the input without whitespace."""
        text = "Well, (he said) it's 3.5 «km» away: really?!"
        assert "".join(tokenize(text).split()) == "".join(text.split())

    @pytest.mark.parametrize(
        "text",
        [
            "The dog runs.",
            "Don't go!",
            "Pi is 3.14, roughly; see (notes).",
            '«Quoi?» dit-il: "rien".',
            "x'y''z",
        ],
    )
    def test_idempotent_on_token_boundaries(self, text):
        once = tokenize(text)
        assert tokenize(once).split() == once.split()


class TestHelpers:
    """Tests for token splitting and request lines."""

    def test_split_tokens_positions(self):
        assert split_tokens("The dog runs . ") == [
            Token("The", 0),
            Token("dog", 1),
            Token("runs", 2),
            Token(".", 3),
        ]

    def test_request_line_is_single_line(self):
        line = request_line("The dog\nruns.")
        assert line == "The dog runs ."
        assert "\n" not in line

    def test_request_line_blank(self):
        assert request_line("   \n ") == ""

    def test_class_and_function_agree(self):
        assert TaggerTokenizer.tokenize("a.b") == tokenize("a.b")
