# course_parser.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Pattern

from scale_rules import GRADE_VOCABULARY, grade_points


# =========================
# Regex & constants
# =========================

GRADE_ALT = '|'.join(re.escape(g) for g in GRADE_VOCABULARY)

# "CSE 101 Intro to Something 5.00 5.00 A ..."
# The description is non-greedy: it ends at the first position followed by
# attempted, earned and a grade symbol standing as its own token.
COURSE_PAT = re.compile(
    r"^(?P<prefix>\w+)\s+(?P<number>\d+\w*)\s+"
    r"(?P<description>.*?)\s+"
    r"(?P<attempted>[\d.]+)\s+(?P<earned>[\d.]+)\s+"
    r"(?P<grade>" + GRADE_ALT + r")(?=\s|$)"
)

REQUIRED_GROUPS = ('prefix', 'number', 'description', 'attempted', 'earned', 'grade')


def validate_course_pattern(pattern: Pattern[str]) -> Pattern[str]:
    missing = [g for g in REQUIRED_GROUPS if g not in pattern.groupindex]
    if missing:
        raise ValueError(f"course pattern lacks named groups: {', '.join(missing)}")
    return pattern


# =========================
# Records
# =========================

@dataclass(frozen=True)
class Course:
    term: str
    name: str
    description: str
    attempted: float
    earned: float
    grade: str
    points: float

    def as_row(self) -> dict:
        return {
            'term': self.term,
            'name': self.name,
            'description': self.description,
            'attempted': self.attempted,
            'earned': self.earned,
            'grade': self.grade,
            'points': self.points,
        }


class LineStatus(Enum):
    COURSE = 'course'
    NO_MATCH = 'no_match'
    NO_TERM = 'no_term'
    BAD_NUMBER = 'bad_number'


class LineParse(NamedTuple):
    status: LineStatus
    course: Optional[Course] = None
    detail: str = ''


# =========================
# Parsing
# =========================

def parse_course_line(line: str, term: str, pattern: Pattern[str] = COURSE_PAT) -> LineParse:
    """
    Try to read one course row out of a rebuilt line.

    Nothing is emitted for headers, page furniture and blank rows
    (NO_MATCH), for rows seen before any term header (NO_TERM) or when
    a numeric field fits the grammar but is not a number (BAD_NUMBER).
    """
    m = pattern.match((line or '').strip())
    if not m:
        return LineParse(LineStatus.NO_MATCH)
    if not term:
        return LineParse(LineStatus.NO_TERM, detail=m.group(0))

    try:
        attempted = float(m.group('attempted'))
        earned = float(m.group('earned'))
    except ValueError as e:
        return LineParse(LineStatus.BAD_NUMBER, detail=str(e))

    grade = m.group('grade')
    course = Course(
        term=term,
        name=f"{m.group('prefix')} {m.group('number')}",
        description=m.group('description').strip(),
        attempted=attempted,
        earned=earned,
        grade=grade,
        points=grade_points(attempted, grade),
    )
    return LineParse(LineStatus.COURSE, course)
