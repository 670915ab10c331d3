"""Text helpers shared by the providers: HTML stripping, chunking, duration."""

from __future__ import annotations

import math
import re

_TAG_RE = re.compile(r"<[^>]+>")

# A sentence is a run ending in one or more terminators; a trailing run with
# no terminator is kept as its own piece so no text is dropped.
_SENTENCE_RE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+$")

WORDS_PER_MINUTE = 150


def strip_html(text: str) -> str:
    """Remove HTML tags and surrounding whitespace."""
    return _TAG_RE.sub("", text or "").strip()


def split_into_chunks(text: str, max_length: int) -> list[str]:
    """Split text into chunks of at most ``max_length`` characters.

    Sentences are accumulated greedily so chunks break on sentence
    boundaries where possible. A single sentence longer than the ceiling is
    hard-split.
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")

    sentences = _SENTENCE_RE.findall(text) or [text]

    chunks: list[str] = []
    current = ""

    def flush() -> None:
        piece = current.strip()
        if piece:
            chunks.append(piece)

    for sentence in sentences:
        if len(current) + len(sentence) <= max_length:
            current += sentence
            continue

        flush()
        current = sentence
        while len(current) > max_length:
            head, current = current[:max_length], current[max_length:]
            piece = head.strip()
            if piece:
                chunks.append(piece)

    flush()
    return chunks


def estimate_duration(text: str) -> int:
    """Estimate narration length in seconds at ~150 words per minute."""
    word_count = len(text.split())
    return math.ceil(word_count / WORDS_PER_MINUTE * 60)


def content_preview(text: str, limit: int = 500) -> str:
    """First ``limit`` characters of the content, with HTML tags removed."""
    return _TAG_RE.sub("", (text or "")[:limit])
