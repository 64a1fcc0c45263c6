"""
Tests for course row parsing.
"""

import re

import pytest

from course_parser import COURSE_PAT, Course, LineStatus, parse_course_line, validate_course_pattern

TERM = "2022 Fall Quarter"


class TestParseCourseLine:

    def test_scenario_line_yields_course(self):
        res = parse_course_line("CSE 101 Intro to Something 5.00 5.00 A ", TERM)
        assert res.status is LineStatus.COURSE
        assert res.course == Course(
            term=TERM, name="CSE 101", description="Intro to Something",
            attempted=5.0, earned=5.0, grade="A", points=20.0,
        )

    def test_trailing_columns_after_grade(self):
        res = parse_course_line("MATH 19A Calculus 5.00 5.00 B+ 16.500 ", TERM)
        assert res.course.name == "MATH 19A"
        assert res.course.grade == "B+"
        assert res.course.points == pytest.approx(16.5)

    def test_description_with_embedded_numbers(self):
        res = parse_course_line("CSE 12 Computer Systems 2 and 3 Assembly 7.00 7.00 A- ", TERM)
        assert res.course.description == "Computer Systems 2 and 3 Assembly"
        assert res.course.attempted == 7.0

    def test_description_is_shortest_match(self):
        # A number pair followed by a grade inside the description ends it
        res = parse_course_line("HIS 10 Topics 1.0 2.0 A 4.00 4.00 B ", TERM)
        assert res.course.description == "Topics"
        assert res.course.attempted == 1.0
        assert res.course.grade == "A"

    def test_description_trimmed(self):
        res = parse_course_line("  ART 1   Drawing    2.00 2.00 A  ", TERM)
        assert res.course.description == "Drawing"

    @pytest.mark.parametrize("grade", ["P", "NP", "W"])
    def test_non_gpa_grades(self, grade):
        res = parse_course_line(f"PHYS 5L Lab 4.00 4.00 {grade} ", TERM)
        assert res.course.grade == grade
        assert res.course.points == 0.0

    def test_np_not_read_as_p(self):
        res = parse_course_line("PHYS 5L Lab 4.00 0.00 NP", TERM)
        assert res.course.grade == "NP"

    def test_grade_must_stand_alone(self):
        res = parse_course_line("CSE 101 Intro 5.00 5.00 Ax", TERM)
        assert res.status is LineStatus.NO_MATCH

    def test_grade_outside_vocabulary(self):
        assert parse_course_line("CSE 101 Intro 5.00 5.00 E ", TERM).status is LineStatus.NO_MATCH

    def test_grade_at_end_of_line(self):
        res = parse_course_line("CSE 101 Intro 5.00 5.00 C-", TERM)
        assert res.course.grade == "C-"
        assert res.course.points == pytest.approx(8.5)

    def test_non_course_lines(self):
        for line in ["", "   ", "2022 Fall Quarter ", "Undergraduate Academic Transcript ",
                     "Term GPA 3.65 Cumulative 3.67 "]:
            assert parse_course_line(line, TERM).status is LineStatus.NO_MATCH

    def test_no_term_emits_nothing(self):
        res = parse_course_line("CSE 101 Intro to Something 5.00 5.00 A ", "")
        assert res.status is LineStatus.NO_TERM
        assert res.course is None

    def test_bad_number_is_skipped(self):
        res = parse_course_line("CSE 101 Intro 5.0.0 5.00 A ", TERM)
        assert res.status is LineStatus.BAD_NUMBER
        assert res.course is None

    def test_course_is_frozen(self):
        c = parse_course_line("CSE 101 Intro 5.00 5.00 A", TERM).course
        with pytest.raises(AttributeError):
            c.grade = "B"  # type: ignore


class TestValidateCoursePattern:

    def test_default_pattern_is_valid(self):
        assert validate_course_pattern(COURSE_PAT) is COURSE_PAT

    def test_missing_groups_rejected(self):
        with pytest.raises(ValueError, match="attempted"):
            validate_course_pattern(re.compile(r"(?P<prefix>\w+) (?P<number>\d+)"))

    def test_custom_pattern_used(self):
        pat = re.compile(
            r"^(?P<prefix>[A-Z]+)-(?P<number>\d+)\|(?P<description>[^|]*)\|"
            r"(?P<attempted>[\d.]+)\|(?P<earned>[\d.]+)\|(?P<grade>[A-F][+-]?|P|NP|W)$"
        )
        res = parse_course_line("CSE-101|Intro|4|4|B", TERM, validate_course_pattern(pat))
        assert res.course.name == "CSE 101"
        assert res.course.points == 12.0
