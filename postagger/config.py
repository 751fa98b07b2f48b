"""Configuration management for the tagging pipeline."""

import codecs
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class TaggerConfig(BaseModel):
    """Configuration for the external tagger process."""

    executable: Path = Path("tree-tagger")
    arguments: list[str] = Field(
        default_factory=list,
        description="Extra arguments placed before the profile argument",
    )
    profile_flag: Optional[str] = Field(
        default=None,
        description="Option preceding the profile path, if the tagger needs one",
    )
    delimiter: str = Field(
        default="<EOS>",
        description="Sentence delimiter line ending every request and response",
    )
    encoding: str = "utf-8"
    timeout: float = Field(default=5.0, gt=0.0)
    startup_delay: float = Field(
        default=0.5,
        ge=0.0,
        description="Settling delay after spawning before the session is READY",
    )
    busy_policy: Literal["queue", "fail"] = "queue"
    max_timeouts: int = Field(
        default=3,
        ge=1,
        description="Consecutive unanswered requests after which a session is restarted",
    )

    @field_validator("executable", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        return Path(v) if isinstance(v, str) else v

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """The delimiter must survive whitespace splitting as one unit."""
        if not v:
            raise ValueError("Delimiter must not be empty")
        if any(ch.isspace() for ch in v):
            raise ValueError(f"Delimiter must not contain whitespace: {v!r}")
        if "/" in v:
            raise ValueError(f"Delimiter must not contain '/': {v!r}")
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v!r}") from e
        return v


class OutputConfig(BaseModel):
    """Configuration for output options."""

    format: Literal["csv", "jsonl"] = "csv"
    output_path: Path = Path("output/tagged_spans.csv")
    include_text: bool = True


class Config(BaseModel):
    """Main configuration for the tagging pipeline."""

    input_file: Optional[Path] = None
    default_language: Optional[str] = None
    # Language key -> tagger profile; None means tagging is unsupported.
    profiles: dict[str, Optional[Path]] = Field(default_factory=dict)
    tagger: TaggerConfig = Field(default_factory=TaggerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("input_file", mode="before")
    @classmethod
    def convert_input_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    def profile_for(self, language: str) -> Optional[Path]:
        """Return the configured profile for a language, or None."""
        return self.profiles.get(language)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)


def load_config(config_path: Optional[str | Path] = None) -> Config:
    """
    Load tagging configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, looks for config.yaml in current directory.

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file not found
        pydantic.ValidationError: If config is invalid
    """
    if config_path is None:
        config_path = Path("config.yaml")

    return Config.from_yaml(config_path)


def get_default_config() -> Config:
    """Get default configuration with no language profiles."""
    return Config()
