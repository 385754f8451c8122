"""Message segmentation for display.

Hides the details of how fenced code blocks are located in message text.
A message is split into prose and code spans; the renderer decides how
each kind looks.
"""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

FENCE = "```"

# Non-greedy so adjacent blocks stay separate; [\s\S] spans newlines
_FENCED_BLOCK = re.compile(r"```[\s\S]*?```")
# Opening fence plus an optional language tag ending the fence line
_OPENING_FENCE = re.compile(r"^```(?:(\w+)\n)?", re.ASCII)
_CLOSING_FENCE = re.compile(r"```$")


class SpanKind(str, Enum):
    """Kind of a message span."""

    PROSE = "prose"
    CODE = "code"


class Span(BaseModel):
    """A contiguous labeled region of a message."""

    model_config = ConfigDict(frozen=True)

    kind: SpanKind
    content: str = Field(description="Text to display")
    raw: str = Field(description="Verbatim source text, fences included for code")
    language: str | None = Field(default=None, description="Language tag of a code span")

    @classmethod
    def prose(cls, text: str) -> "Span":
        return cls(kind=SpanKind.PROSE, content=text, raw=text)

    @classmethod
    def code(cls, block: str) -> "Span":
        opening = _OPENING_FENCE.match(block)
        language = opening.group(1) if opening else None
        body = block[opening.end():] if opening else block
        body = _CLOSING_FENCE.sub("", body, count=1)
        return cls(kind=SpanKind.CODE, content=body.strip(), raw=block, language=language)


def segment(text: str) -> list[Span]:
    """Split message text into ordered prose and code spans.

    Unbalanced fences (an odd number of markers) are not an error: the
    whole text is returned as a single prose span.

    Args:
        text: Message text

    Returns:
        Spans in source order; never empty
    """
    if text.count(FENCE) % 2 == 1:
        return [Span.prose(text)]

    spans: list[Span] = []
    position = 0
    for match in _FENCED_BLOCK.finditer(text):
        if match.start() > position:
            spans.append(Span.prose(text[position:match.start()]))
        spans.append(Span.code(match.group(0)))
        position = match.end()

    if position < len(text):
        spans.append(Span.prose(text[position:]))

    return spans or [Span.prose("")]


def join_spans(spans: list[Span]) -> str:
    """Reassemble the source text from its spans."""
    return "".join(span.raw for span in spans)


def has_code(text: str) -> bool:
    """Check whether the text contains at least one balanced code block."""
    return any(span.kind is SpanKind.CODE for span in segment(text))
