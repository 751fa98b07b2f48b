"""Tabular export of tagged spans."""

import logging
from pathlib import Path
from typing import Iterable, Literal, Optional

import pandas as pd

from .models import SentenceResult

logger = logging.getLogger(__name__)

COLUMNS = ["sentence_index", "start", "end", "tag"]


def spans_to_frame(
    results: Iterable[SentenceResult],
    document: Optional[str] = None,
    include_text: bool = True,
    tags: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """
    Flatten sentence results into one row per span, in document coordinates.

    Args:
        results: Sentence results, in document order
        document: Source document, needed for the text column
        include_text: Whether to add the covered text
        tags: If given, keep only spans with these tags

    Returns:
        DataFrame with sentence_index, start, end, tag (and text) columns
    """
    wanted = set(tags) if tags else None
    with_text = include_text and document is not None
    rows = []
    for idx, result in enumerate(results):
        for span in result.document_spans():
            if wanted is not None and span.tag not in wanted:
                continue
            row = {
                "sentence_index": idx,
                "start": span.start,
                "end": span.end,
                "tag": span.tag,
            }
            if with_text:
                row["text"] = span.text(document)
            rows.append(row)

    columns = COLUMNS + (["text"] if with_text else [])
    return pd.DataFrame(rows, columns=columns)


def write_spans(
    frame: pd.DataFrame,
    output_path: str | Path,
    format: Literal["csv", "jsonl"] = "csv",
) -> Path:
    """Write a span table as CSV or JSON Lines."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format == "csv":
        frame.to_csv(output_path, index=False)
    elif format == "jsonl":
        frame.to_json(output_path, orient="records", lines=True, force_ascii=False)
    else:
        raise ValueError(f"Unsupported format: {format}")

    logger.info("Wrote %d spans to %s", len(frame), output_path)
    return output_path
