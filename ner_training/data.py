from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

EntitySpan = tuple[int, int, str]

OUTSIDE = "O"

_TOKEN_PATTERN = re.compile(r"\w+|[^\w\s]")

# (text, [(start_char, end_char, label), ...])
TRAIN_DATA: tuple[tuple[str, tuple[EntitySpan, ...]], ...] = (
    ("Who is Shaka Khan?", ((7, 17, "PERSON"),)),
    ("I like London and Berlin.", ((7, 13, "LOC"), (18, 24, "LOC"))),
    ("Angela Merkel visited Paris in May.", ((0, 13, "PERSON"), (22, 27, "LOC"))),
    ("Barack Obama lives in Washington.", ((0, 12, "PERSON"), (22, 32, "LOC"))),
)


@dataclass(frozen=True, slots=True)
class Token:
    text: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class TaggedSentence:
    text: str
    tokens: tuple[Token, ...]
    tags: tuple[str, ...]


def tokenize(text: str) -> list[Token]:
    return [Token(m.group(), m.start(), m.end()) for m in _TOKEN_PATTERN.finditer(text)]


def bio_tags(tokens: Sequence[Token], spans: Iterable[EntitySpan]) -> list[str]:
    """Project character-offset entity spans onto BIO token tags."""
    tags = [OUTSIDE] * len(tokens)
    for start, end, label in spans:
        covered = [i for i, tok in enumerate(tokens) if tok.start >= start and tok.end <= end]
        if not covered:
            raise ValueError(f"Entity span ({start}, {end}, {label!r}) covers no token")
        for position, index in enumerate(covered):
            tags[index] = f"B-{label}" if position == 0 else f"I-{label}"
    return tags


def build_sentences(
    examples: Iterable[tuple[str, Iterable[EntitySpan]]] = TRAIN_DATA,
) -> list[TaggedSentence]:
    sentences: list[TaggedSentence] = []
    for text, spans in examples:
        tokens = tokenize(text)
        sentences.append(
            TaggedSentence(text=text, tokens=tuple(tokens), tags=tuple(bio_tags(tokens, spans)))
        )
    return sentences


def decode_spans(tokens: Sequence[Token], tags: Sequence[str]) -> list[EntitySpan]:
    """Collapse BIO tags back into character spans; a stray I- tag opens a new span."""
    spans: list[EntitySpan] = []
    open_label: str | None = None
    for token, tag in zip(tokens, tags, strict=True):
        if tag == OUTSIDE:
            open_label = None
            continue
        prefix, _, label = tag.partition("-")
        if prefix == "I" and open_label == label:
            start = spans[-1][0]
            spans[-1] = (start, token.end, label)
            continue
        spans.append((token.start, token.end, label))
        open_label = label
    return spans
