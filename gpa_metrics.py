# gpa_metrics.py
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from course_parser import Course
from scale_rules import counts_toward_gpa
from term_rules import SEASON_ORDER, sort_terms, term_sort_key


COURSE_COLUMNS = ['term', 'name', 'description', 'attempted', 'earned', 'grade', 'points']


@dataclass(frozen=True)
class AggregateResult:
    total_attempted_credits: float = 0.0
    total_earned_credits: float = 0.0
    total_gpa_units: float = 0.0
    total_grade_points: float = 0.0
    cumulative_gpa: float = 0.0
    quarterly_gpa: List[Tuple[str, float]] = field(default_factory=list)

    def as_row(self) -> Dict[str, object]:
        return {
            'total_attempted_credits': round(self.total_attempted_credits, 2),
            'total_earned_credits': round(self.total_earned_credits, 2),
            'total_gpa_units': round(self.total_gpa_units, 2),
            'total_grade_points': round(self.total_grade_points, 2),
            'cumulative_gpa': round(self.cumulative_gpa, 3),
            'num_terms_with_grades': len(self.quarterly_gpa),
        }


# ==========================================================
# GPA
# ==========================================================

def gpa_units(courses: Iterable[Course]) -> float:
    return sum(c.attempted for c in courses if counts_toward_gpa(c.grade))


def compute_gpa(courses: Sequence[Course]) -> float:
    """
    Grade points over GPA units.

    Points are summed over every course while P/NP/W are left out of
    the units only; their points are zero anyway.
    """
    units = gpa_units(courses)
    points = sum(c.points for c in courses)
    return points / units if units > 0 else 0.0


def compute_quarterly_gpa(courses: Sequence[Course],
                          season_order: Sequence[str] = SEASON_ORDER) -> List[Tuple[str, float]]:
    """GPA per term, oldest first. Terms holding only P/NP/W courses do not appear."""
    points: Dict[str, float] = {}
    units: Dict[str, float] = {}
    for c in courses:
        if not counts_toward_gpa(c.grade):
            continue
        points[c.term] = points.get(c.term, 0.0) + c.points
        units[c.term] = units.get(c.term, 0.0) + c.attempted

    series = [(t, points[t] / units[t] if units[t] > 0 else 0.0) for t in points]
    series.sort(key=lambda item: (term_sort_key(item[0], season_order), item[0]))
    return series


def compute_range_gpa(courses: Sequence[Course], start_term: str, end_term: str,
                      season_order: Sequence[str] = SEASON_ORDER) -> Optional[float]:
    """
    GPA over the inclusive run of terms from start_term to end_term.

    Returns None, not 0.0, when a bound is not among the parsed terms or
    when start_term comes after end_term.
    """
    terms = sort_terms((c.term for c in courses), season_order)
    if start_term not in terms or end_term not in terms:
        return None
    lo, hi = terms.index(start_term), terms.index(end_term)
    if lo > hi:
        return None
    selected = set(terms[lo:hi + 1])
    return compute_gpa([c for c in courses if c.term in selected])


def summarize(courses: Sequence[Course], season_order: Sequence[str] = SEASON_ORDER) -> AggregateResult:
    courses = list(courses)
    return AggregateResult(
        total_attempted_credits=sum(c.attempted for c in courses),
        total_earned_credits=sum(c.earned for c in courses),
        total_gpa_units=gpa_units(courses),
        total_grade_points=sum(c.points for c in courses),
        cumulative_gpa=compute_gpa(courses),
        quarterly_gpa=compute_quarterly_gpa(courses, season_order),
    )


# ==========================================================
# Frames
# ==========================================================

def courses_frame(courses: Iterable[Course]) -> pd.DataFrame:
    return pd.DataFrame([c.as_row() for c in courses], columns=COURSE_COLUMNS)


def courses_from_frame(df: pd.DataFrame) -> List[Course]:
    """Rebuild Course records from a frame with COURSE_COLUMNS (e.g. a read-back CSV)."""
    missing = [c for c in COURSE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"missing course columns: {', '.join(missing)}")
    out: List[Course] = []
    for row in df[COURSE_COLUMNS].itertuples(index=False):
        out.append(Course(
            term=str(row.term),
            name=str(row.name),
            description='' if pd.isna(row.description) else str(row.description),
            attempted=float(row.attempted),
            earned=float(row.earned),
            grade=str(row.grade),
            points=float(row.points),
        ))
    return out


def quarterly_frame(series: Sequence[Tuple[str, float]]) -> pd.DataFrame:
    return pd.DataFrame(
        [{'term': t, 'gpa': round(g, 3)} for t, g in series],
        columns=['term', 'gpa'],
    )
