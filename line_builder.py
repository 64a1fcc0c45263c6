# line_builder.py
# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Iterable, Iterator, List, NamedTuple

# Baselines of fragments on one printed row differ by a few units
VERTICAL_TOLERANCE = 5.0


class PositionedToken(NamedTuple):
    """A text fragment as handed over by the renderer."""
    text: str
    y: float
    x: float = 0.0
    page: int = 0


class LogicalLine(NamedTuple):
    text: str
    fragments: tuple


def iter_logical_lines(tokens: Iterable[PositionedToken],
                       tolerance: float = VERTICAL_TOLERANCE) -> Iterator[LogicalLine]:
    """
    Fold tokens (already in reading order) into rows by vertical position.

    A token whose y differs from the running position by more than
    `tolerance` closes the current row and starts a new one at its y.
    Every token contributes "text " to the row it lands in. The last row
    is flushed after the input ends; empty buffers are never yielded.
    """
    position = 0.0
    buf: List[str] = []
    fragments: List[str] = []

    for tok in tokens:
        if abs(tok.y - position) > tolerance:
            if fragments:
                yield LogicalLine(''.join(buf), tuple(fragments))
            buf = []
            fragments = []
            position = tok.y
        buf.append(tok.text + ' ')
        fragments.append(tok.text)

    if fragments:
        yield LogicalLine(''.join(buf), tuple(fragments))


def raw_text(tokens: Iterable[PositionedToken]) -> str:
    return ' '.join(t.text for t in tokens)
