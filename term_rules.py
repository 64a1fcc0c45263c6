# term_rules.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

# Term header like "2023 Fall Quarter"
TERM_PAT = re.compile(r"(\d{4}\s+\w+\s+Quarter)")

SEASON_ORDER: Tuple[str, ...] = ('Winter', 'Spring', 'Summer', 'Fall')


def detect_term(text: str, pattern: Pattern[str] = TERM_PAT) -> Optional[str]:
    m = pattern.search(text or '')
    if not m:
        return None
    return m.group(1) if m.groups() else m.group(0)


def term_sort_key(term: str, season_order: Sequence[str] = SEASON_ORDER) -> Tuple[str, int]:
    """
    (year, season index) for a term string such as "2023 Fall Quarter".

    The year is the first 4-digit word and the season the first word found
    in `season_order`, wherever they sit ("Fall 2023" sorts the same way).
    Years are fixed width so they compare as strings. A missing season
    gets -1 and sorts ahead of the known ones in its year.
    """
    parts = (term or '').split()
    year = next((p for p in parts if len(p) == 4 and p.isdigit()), '')
    season = next((p for p in parts if p in season_order), '')
    idx = season_order.index(season) if season else -1
    return year, idx


def sort_terms(terms: Iterable[str], season_order: Sequence[str] = SEASON_ORDER) -> List[str]:
    """Distinct terms in chronological order."""
    return sorted(set(terms), key=lambda t: (term_sort_key(t, season_order), t))
