# scale_rules.py
# -*- coding: utf-8 -*-

from __future__ import annotations
from typing import Dict, FrozenSet

# 4.0 scale used by quarter-system transcripts
LETTER_TO_4: Dict[str, float] = {
    'A+': 4.0, 'A': 4.0, 'A-': 3.7,
    'B+': 3.3, 'B': 3.0, 'B-': 2.7,
    'C+': 2.3, 'C': 2.0, 'C-': 1.7,
    'D+': 1.3, 'D': 1.0, 'D-': 0.7,
    'F': 0.0,
}

# Pass / No Pass / Withdrawn: recorded, but never part of the GPA denominator
NON_GPA_GRADES: FrozenSet[str] = frozenset({'P', 'NP', 'W'})

# Everything a course row may end with, longest symbols first so that an
# alternation built from it never stops at a prefix ("NP" before "P").
GRADE_VOCABULARY = tuple(sorted(set(LETTER_TO_4) | NON_GPA_GRADES, key=lambda g: (-len(g), g)))


def grade_value(grade: str) -> float:
    """Scale value of a grade symbol; P/NP/W and unknown symbols are worth 0.0."""
    return LETTER_TO_4.get(grade, 0.0)


def counts_toward_gpa(grade: str) -> bool:
    return grade not in NON_GPA_GRADES


def grade_points(attempted: float, grade: str) -> float:
    return attempted * grade_value(grade)
