"""Plain-text previews for the article list view."""

import math
import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PreviewConfig:
    max_length: int = 200
    split_point: int = 150
    ellipsis: str = "..."
    words_per_minute: int = 200


DEFAULT_PREVIEW = PreviewConfig()

_HEADING_MARKER_RE = re.compile(r"#+\s*")
_BOLD_LABEL_RE = re.compile(r"\*\*([^*\n]*?):\*\*\s*")
_CODE_SPAN_RE = re.compile(r"`([^`]*)`")
_LINE_BULLET_RE = re.compile(r"^[ \t]*[•\-–*]+[ \t]*", re.MULTILINE)
_LINE_ORDINAL_RE = re.compile(r"^[ \t]*\d+[.)][ \t]*", re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")


def clean_markup(content: str) -> str:
    """Strip structural markup and collapse all whitespace to single spaces."""
    text = _HEADING_MARKER_RE.sub("", content)
    text = _BOLD_LABEL_RE.sub(r"\1: ", text)
    text = _CODE_SPAN_RE.sub(r"\1", text)
    text = _LINE_BULLET_RE.sub("", text)
    text = _LINE_ORDINAL_RE.sub("", text)
    text = text.replace("*", "").replace("•", "").replace("`", "")
    return _WHITESPACE_RE.sub(" ", text).strip()


def summarize(content: str, config: Optional[PreviewConfig] = None) -> str:
    """Return a markup-free excerpt of at most `max_length` plus the ellipsis.

    Short text is returned as is. Longer text is cut after the last full stop
    past `split_point`, else at the last space past it (with an ellipsis), else
    hard-cut with an ellipsis.
    """
    if not isinstance(content, str):
        return ""
    config = config or DEFAULT_PREVIEW

    cleaned = clean_markup(content)
    if len(cleaned) <= config.max_length:
        return cleaned

    preview = cleaned[: config.max_length]
    last_sentence = preview.rfind(".")
    last_space = preview.rfind(" ")

    if last_sentence > config.split_point:
        return preview[: last_sentence + 1]
    if last_space > config.split_point:
        return preview[:last_space] + config.ellipsis
    return preview + config.ellipsis


def reading_minutes(content: str, config: Optional[PreviewConfig] = None) -> int:
    """Estimated reading time, rounded up to whole minutes."""
    config = config or DEFAULT_PREVIEW
    words = len((content or "").split(" "))
    return math.ceil(words / config.words_per_minute)
