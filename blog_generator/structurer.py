"""Turn loosely formatted model output into typed display blocks.

Generated articles mostly follow Markdown conventions but not reliably: bullets
may be stars, headings may be numbered bold lines, section labels may be
upper-case lines. Each paragraph is run through an ordered chain of small,
pure classifiers and the first one that recognizes it decides the block type.
Nothing here raises; anything unrecognized becomes a plain paragraph.
"""

import html
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

BULLET = "•"


@dataclass(frozen=True)
class StructurerConfig:
    """Thresholds for the subheading and list heuristics."""

    subheading_max_length: int = 100
    subheading_min_length: int = 5
    max_display_level: int = 6
    list_introducers: Tuple[str, ...] = ("Benefits:", "How to use it:")


DEFAULT_CONFIG = StructurerConfig()


@dataclass
class Heading:
    level: int
    text: str
    display_level: int
    kind: str = field(default="heading", init=False)


@dataclass
class Subheading:
    text: str
    kind: str = field(default="subheading", init=False)


@dataclass
class Paragraph:
    """Paragraph text with inline markup already converted to HTML."""

    text: str
    kind: str = field(default="paragraph", init=False)


@dataclass
class ListBlock:
    items: List[str]
    kind: str = field(default="list", init=False)


Block = Union[Heading, Subheading, Paragraph, ListBlock]
Classifier = Callable[[str, StructurerConfig], Optional[List[Block]]]

_EXCESS_EMPHASIS_RE = re.compile(r"\*{3,}")
_STAR_BULLET_RE = re.compile(r"^[ \t]*\*+[ \t]+", re.MULTILINE)
_DEEP_HEADING_RE = re.compile(r"^[ \t]*#{3,}[ \t]+", re.MULTILINE)
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")

_HEADING_RE = re.compile(r"^(#+)\s*")
_ORDINAL_RE = re.compile(r"^(?:\*\*)?\d+\.(?:\*\*)?\s*")
_TRAILING_BOLD_RE = re.compile(r"\*\*$")
_BULLET_PREFIX_RE = re.compile(r"^(?:[•\-]|\*(?!\*))\s*")

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_CODE_RE = re.compile(r"`(.*?)`")


def normalize_content(content: str) -> str:
    """Canonicalize emphasis runs, star bullets, deep headings and blank lines."""
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    text = _EXCESS_EMPHASIS_RE.sub("**", text)
    text = _STAR_BULLET_RE.sub(f"{BULLET} ", text)
    text = _DEEP_HEADING_RE.sub("", text)
    return _EXCESS_NEWLINES_RE.sub("\n\n", text)


def render_inline(text: str) -> str:
    """Escape HTML, then convert `**bold**`, `*italic*` and `` `code` `` spans."""
    rendered = html.escape(text, quote=False)
    rendered = _BOLD_RE.sub(r"<strong>\1</strong>", rendered)
    rendered = _ITALIC_RE.sub(r"<em>\1</em>", rendered)
    return _CODE_RE.sub(r"<code>\1</code>", rendered)


def _is_wrapped_in_bold(text: str) -> bool:
    return (
        len(text) > 4
        and text.startswith("**")
        and text.endswith("**")
        and "**" not in text[2:-2]
    )


def _plain_label(text: str) -> str:
    """Label text with bold markers removed; subheadings are rendered escaped."""
    return _BOLD_RE.sub(r"\1", text).strip()


def _is_introducer(line: str, config: StructurerConfig) -> bool:
    lowered = line.lower()
    return any(lowered.startswith(phrase.lower()) for phrase in config.list_introducers)


def classify_heading(section: str, config: StructurerConfig) -> Optional[List[Block]]:
    if not section.startswith("#"):
        return None
    match = _HEADING_RE.match(section)
    level = len(match.group(1))
    text = _plain_label(section[match.end():])
    display_level = min(level + 1, config.max_display_level)
    return [Heading(level=level, text=text, display_level=display_level)]


def classify_bold_line(section: str, config: StructurerConfig) -> Optional[List[Block]]:
    if "\n" in section or not _is_wrapped_in_bold(section):
        return None
    return [Subheading(text=section[2:-2].strip())]


def classify_ordinal(section: str, config: StructurerConfig) -> Optional[List[Block]]:
    if not _ORDINAL_RE.match(section):
        return None
    text = _ORDINAL_RE.sub("", section, count=1)
    text = _TRAILING_BOLD_RE.sub("", text).strip()
    return [Subheading(text=_plain_label(text))]


def classify_short_label(section: str, config: StructurerConfig) -> Optional[List[Block]]:
    length = len(section)
    if not config.subheading_min_length < length < config.subheading_max_length:
        return None
    shouting = section == section.upper() and any(ch.isalpha() for ch in section)
    if shouting or section.endswith(":"):
        return [Subheading(text=_plain_label(section))]
    return None


def _looks_like_list(section: str, config: StructurerConfig) -> bool:
    if BULLET in section or "\n-" in section:
        return True
    if "*" in section and "\n" in section:
        return True
    return any(phrase in section for phrase in config.list_introducers)


def _list_item_text(line: str) -> str:
    item = _BULLET_PREFIX_RE.sub("", line, count=1)
    if _is_wrapped_in_bold(item):
        item = item[2:-2].strip()
    return item


def classify_list(section: str, config: StructurerConfig) -> Optional[List[Block]]:
    if not _looks_like_list(section, config):
        return None

    lines = [line.strip() for line in section.split("\n") if line.strip()]
    blocks: List[Block] = []
    pending: List[str] = []

    def flush() -> None:
        if pending:
            blocks.append(ListBlock(items=list(pending)))
            pending.clear()

    for index, line in enumerate(lines):
        # Continuation lines after the first count as items unless they
        # introduce something with a trailing colon.
        if _BULLET_PREFIX_RE.match(line) or (index > 0 and not line.endswith(":")):
            item = _list_item_text(line)
            if item:
                pending.append(render_inline(item))
            continue

        flush()
        if line.endswith(":") or _is_introducer(line, config):
            blocks.append(Subheading(text=_plain_label(line)))
        else:
            blocks.append(Paragraph(text=render_inline(line)))

    flush()
    return blocks


def classify_paragraph(section: str, config: StructurerConfig) -> Optional[List[Block]]:
    return [Paragraph(text=render_inline(section))]


# Order matters: the first classifier returning blocks wins.
CLASSIFIERS: Tuple[Classifier, ...] = (
    classify_heading,
    classify_bold_line,
    classify_ordinal,
    classify_short_label,
    classify_list,
    classify_paragraph,
)


def classify_section(
    section: str,
    config: StructurerConfig = DEFAULT_CONFIG,
    classifiers: Sequence[Classifier] = CLASSIFIERS,
) -> List[Block]:
    for classifier in classifiers:
        blocks = classifier(section, config)
        if blocks is not None:
            return blocks
    return [Paragraph(text=render_inline(section))]


def structure_content(
    content: str, config: Optional[StructurerConfig] = None
) -> List[Block]:
    """Split raw article content into an ordered list of display blocks."""
    if not isinstance(content, str) or not content.strip():
        return []
    config = config or DEFAULT_CONFIG

    blocks: List[Block] = []
    for section in _PARAGRAPH_SPLIT_RE.split(normalize_content(content)):
        section = section.strip()
        if section:
            blocks.extend(classify_section(section, config))
    return blocks


def block_to_dict(block: Block) -> Dict[str, Any]:
    return asdict(block)


def render_blocks_html(blocks: Sequence[Block]) -> str:
    """Render display blocks to an HTML fragment."""
    parts: List[str] = []
    for block in blocks:
        if isinstance(block, Heading):
            tag = f"h{block.display_level}"
            parts.append(f"<{tag}>{html.escape(block.text, quote=False)}</{tag}>")
        elif isinstance(block, Subheading):
            parts.append(f"<h4>{html.escape(block.text, quote=False)}</h4>")
        elif isinstance(block, ListBlock):
            items = "".join(f"<li>{item}</li>" for item in block.items)
            parts.append(f"<ul>{items}</ul>")
        else:
            parts.append(f"<p>{block.text}</p>")
    return "\n".join(parts)
