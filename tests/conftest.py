import sys
from pathlib import Path

import pytest

# Scripts live at the repository root
ROOT = Path(__file__).resolve().parent.parent
if ROOT.as_posix() not in sys.path:
    sys.path.insert(0, ROOT.as_posix())

from course_parser import Course  # noqa: E402
from line_builder import PositionedToken  # noqa: E402
from scale_rules import grade_points  # noqa: E402


def make_course(term, grade, attempted=4.0, earned=None, name="CSE 101", description="Course"):
    return Course(
        term=term,
        name=name,
        description=description,
        attempted=attempted,
        earned=attempted if earned is None else earned,
        grade=grade,
        points=grade_points(attempted, grade),
    )


def rows_to_tokens(rows, start_y=100.0, step=14.0, page=0):
    """Each row is a list of fragments printed on one baseline."""
    toks = []
    for i, row in enumerate(rows):
        y = start_y + i * step
        for j, frag in enumerate(row):
            toks.append(PositionedToken(text=frag, y=y, x=50.0 + 60.0 * j, page=page))
    return toks


@pytest.fixture
def course():
    return make_course


@pytest.fixture
def sample_pages():
    """Two pages; the Winter header sits on the first page, its rows continue on the second."""
    page1 = rows_to_tokens([
        ["University of California, Santa Cruz"],
        ["Undergraduate Academic Transcript"],
        ["2022 Fall Quarter"],
        ["CSE", "101", "Intro to Something", "5.00", "5.00", "A", "20.000"],
        ["MATH", "19A", "Calculus for Science 1", "5.00", "5.00", "B+", "16.500"],
        ["PHYS", "5L", "Lab", "1.00", "1.00", "P", "0.000"],
        ["2023 Winter Quarter"],
    ])
    page2 = rows_to_tokens([
        ["CSE", "12", "Computer Systems and Assembly Language", "7.00", "7.00", "A-", "25.900"],
        ["WRIT", "2", "Rhetoric and Inquiry", "5.00", "0.00", "W", "0.000"],
    ], page=1)
    return [page1, page2]
