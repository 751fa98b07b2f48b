"""Shared fixtures for the tagging tests."""

from pathlib import Path

import pytest

from postagger.config import Config, TaggerConfig

from .fakes import LEXICON, fake_tagger_config


@pytest.fixture
def make_profile(tmp_path):
    """Write a fake tagger profile with the default lexicon plus directives."""

    def _make(*directives: str, name: str = "profile.txt") -> Path:
        lines = [f"{word} {tag}" for word, tag in LEXICON.items()]
        lines.extend(directives)
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _make


@pytest.fixture
def tagger_config() -> TaggerConfig:
    return fake_tagger_config()


@pytest.fixture
def config(make_profile) -> Config:
    """Pipeline config with an English profile and an unsupported language."""
    return Config(
        profiles={"en": make_profile(), "xx": None},
        default_language="en",
        tagger=fake_tagger_config(),
    )
