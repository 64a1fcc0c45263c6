# bulk_ingest.py  -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import csv
import glob
import itertools
import os
import re
import sys
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

import fitz  # PyMuPDF

from course_parser import COURSE_PAT, Course, LineStatus, parse_course_line, validate_course_pattern
from gpa_metrics import COURSE_COLUMNS, AggregateResult, summarize
from line_builder import VERTICAL_TOLERANCE, LogicalLine, PositionedToken, iter_logical_lines, raw_text
from term_rules import SEASON_ORDER, TERM_PAT, detect_term


# =========================
# Config
# =========================

# Plain-text transcripts: one row per line, spaced well beyond the tolerance
TXT_LINE_HEIGHT = 20.0


@dataclass(frozen=True)
class ExtractionConfig:
    tolerance: float = VERTICAL_TOLERANCE
    term_pattern: Pattern[str] = TERM_PAT
    course_pattern: Pattern[str] = COURSE_PAT
    season_order: Tuple[str, ...] = SEASON_ORDER

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        validate_course_pattern(self.course_pattern)


class TranscriptReadError(Exception):
    """The document could not be turned into tokens; nothing was extracted."""

    def __init__(self, path: str, cause: str):
        super().__init__(f"cannot read {path}: {cause}")
        self.path = path
        self.cause = cause


# =========================
# Extraction run
# =========================

@dataclass
class ExtractionRun:
    """State of one pass over one document. Never shared between documents."""
    config: ExtractionConfig = field(default_factory=ExtractionConfig)
    current_term: str = ''
    courses: List[Course] = field(default_factory=list)
    skipped: Dict[str, int] = field(default_factory=dict)
    lines: int = 0
    verbose: bool = False

    def observe(self, fragment: str) -> None:
        term = detect_term(fragment, self.config.term_pattern)
        if term and term != self.current_term:
            if self.verbose:
                print(f"[term] {term}")
            self.current_term = term

    def consume(self, line: LogicalLine) -> None:
        self.lines += 1
        for frag in line.fragments:
            self.observe(frag)
        res = parse_course_line(line.text, self.current_term, self.config.course_pattern)
        if res.status is LineStatus.COURSE:
            self.courses.append(res.course)
            return
        key = res.status.value
        self.skipped[key] = self.skipped.get(key, 0) + 1
        if self.verbose and res.status is LineStatus.BAD_NUMBER:
            print(f"[parse] skipped row with bad number ({res.detail}): {line.text.strip()!r}")


@dataclass(frozen=True)
class TranscriptExtraction:
    courses: List[Course]
    summary: AggregateResult
    raw_text: str
    lines: int
    skipped: Dict[str, int]


def extract_courses(pages: Iterable[Sequence[PositionedToken]],
                    config: Optional[ExtractionConfig] = None,
                    verbose: bool = False) -> TranscriptExtraction:
    """
    Run the single pass over a whole document.

    Pages are concatenated in order so a term header on one page still
    applies to rows on the next.
    """
    config = config or ExtractionConfig()
    tokens = list(itertools.chain.from_iterable(pages))
    run = ExtractionRun(config=config, verbose=verbose)
    for line in iter_logical_lines(tokens, config.tolerance):
        run.consume(line)

    if verbose:
        print(f"[parse] extracted {len(run.courses)} courses from {run.lines} lines")
    return TranscriptExtraction(
        courses=list(run.courses),
        summary=summarize(run.courses, config.season_order),
        raw_text=raw_text(tokens),
        lines=run.lines,
        skipped=dict(run.skipped),
    )


# =========================
# Token sources
# =========================

def read_pdf_tokens(path: str, verbose: bool = False) -> List[List[PositionedToken]]:
    """One token list per page, spans in the order PyMuPDF reports them."""
    try:
        doc = fitz.open(path)
    except Exception as e:
        raise TranscriptReadError(path, str(e)) from e

    pages: List[List[PositionedToken]] = []
    try:
        n = doc.page_count
        for i, page in enumerate(doc):
            if verbose:
                print(f"[read] page {i + 1} of {n}")
            data = page.get_text('dict')
            toks: List[PositionedToken] = []
            for block in data.get('blocks', []):
                for line in block.get('lines', []):
                    for span in line.get('spans', []):
                        text = span.get('text', '')
                        if not text:
                            continue
                        x, y = span.get('origin', (0.0, 0.0))
                        toks.append(PositionedToken(text=text, y=float(y), x=float(x), page=i))
            pages.append(toks)
    except Exception as e:
        raise TranscriptReadError(path, str(e)) from e
    finally:
        doc.close()
    return pages


def read_text_tokens(path: str) -> List[List[PositionedToken]]:
    try:
        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise TranscriptReadError(path, str(e)) from e
    return [[
        PositionedToken(text=ln, y=(i + 1) * TXT_LINE_HEIGHT)
        for i, ln in enumerate(lines) if ln.strip()
    ]]


def read_tokens(path: str, verbose: bool = False) -> List[List[PositionedToken]]:
    ext = os.path.splitext(path)[1].lower()
    if ext == '.pdf':
        return read_pdf_tokens(path, verbose=verbose)
    if ext == '.txt':
        return read_text_tokens(path)
    raise TranscriptReadError(path, f"unsupported file type {ext or '(none)'}")


# =========================
# IO helpers
# =========================

def transcript_key(path: str, root: Optional[str] = None) -> str:
    """Path relative to the input folder, '/'-separated; unique per ingested file."""
    if root:
        rel = os.path.relpath(path, root)
    else:
        rel = os.path.basename(path)
    return rel.replace(os.sep, '/')


def _collect_files(root: str, patterns: List[str], recursive: bool) -> List[str]:
    files: List[str] = []
    if not recursive:
        for pat in patterns:
            files.extend(glob.glob(os.path.join(root, pat)))
    else:
        for dirpath, _, _ in os.walk(root):
            for pat in patterns:
                files.extend(glob.glob(os.path.join(dirpath, pat)))
    return sorted(set(files))


def _dump_raw_text(debug_dump_dir: str, key: str, text: str) -> None:
    os.makedirs(debug_dump_dir, exist_ok=True)
    with open(os.path.join(debug_dump_dir, key.replace('/', '__') + '.txt'), 'w',
              encoding='utf-8', errors='ignore') as f:
        f.write(text)


# =========================
# Row builder
# =========================

def process_one(path: str, *, config: ExtractionConfig, debug_dump_dir: Optional[str],
                verbose: bool, root: Optional[str] = None) -> Tuple[Dict[str, object], List[Dict[str, object]]]:
    """Summary row plus one row per course for a single transcript file."""
    pages = read_tokens(path, verbose=verbose)
    result = extract_courses(pages, config, verbose=verbose)

    base = os.path.basename(path)
    key = transcript_key(path, root)
    if debug_dump_dir:
        _dump_raw_text(debug_dump_dir, key, result.raw_text)

    row: Dict[str, object] = {'transcript_key': key, 'file': base, 'num_courses': len(result.courses)}
    row.update(result.summary.as_row())
    row['skipped_lines'] = sum(result.skipped.values())

    course_rows = []
    for c in result.courses:
        cr: Dict[str, object] = {'transcript_key': key, 'file': base}
        cr.update(c.as_row())
        course_rows.append(cr)

    if verbose:
        s = result.summary
        print(f"[parsed] {base} -> key={key}")
        print(f"  courses={len(result.courses)} terms={len(s.quarterly_gpa)}")
        print(f"  attempted={s.total_attempted_credits:.2f} earned={s.total_earned_credits:.2f}")
        print(f"  gpa_units={s.total_gpa_units:.2f} grade_points={s.total_grade_points:.2f}")
        print(f"  cumulative_gpa={s.cumulative_gpa:.2f}")
        for term, gpa in s.quarterly_gpa:
            print(f"    {term}: {gpa:.2f}")
    return row, course_rows


# =========================
# CLI
# =========================

SUMMARY_FIELDS = [
    'transcript_key', 'file', 'num_courses', 'total_attempted_credits', 'total_earned_credits',
    'total_gpa_units', 'total_grade_points', 'cumulative_gpa', 'num_terms_with_grades',
    'skipped_lines',
]


def build_config(tolerance: float, term_regex: str = '') -> ExtractionConfig:
    if term_regex:
        return ExtractionConfig(tolerance=tolerance, term_pattern=re.compile(term_regex))
    return ExtractionConfig(tolerance=tolerance)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description='Extract course rows and GPA totals from transcripts')
    p.add_argument('--in-dir', dest='in_dir', help='Directory with transcript files')
    p.add_argument('--folder', dest='folder', help='Alias of --in-dir')
    p.add_argument('--recursive', action='store_true')
    p.add_argument('--glob', default='*.pdf;*.txt')
    p.add_argument('--out', default='_tmp_courses.csv')
    p.add_argument('--summary-out', default='_tmp_summary.csv')
    p.add_argument('--tolerance', type=float, default=VERTICAL_TOLERANCE)
    p.add_argument('--term-regex', default='',
                   help='Term header regex; terms are ordered by the 4-digit year and the '
                        'Winter/Spring/Summer/Fall word found in each match')
    p.add_argument('--debug-dump', default=None)
    p.add_argument('--verbose', action='store_true')
    args = p.parse_args(argv)

    in_dir = args.in_dir or args.folder
    if not in_dir:
        print('ERROR: --in-dir/--folder is required', file=sys.stderr)
        sys.exit(2)

    try:
        config = build_config(args.tolerance, args.term_regex)
    except (ValueError, re.error) as e:
        print(f'ERROR: {e}', file=sys.stderr)
        sys.exit(2)

    patterns = [g.strip() for g in args.glob.split(';') if g.strip()]
    files = _collect_files(in_dir, patterns, args.recursive)

    rows: List[Dict[str, object]] = []
    course_rows: List[Dict[str, object]] = []

    if not files:
        print('No input files found.')

    for fp in files:
        try:
            row, crs = process_one(fp, config=config, debug_dump_dir=args.debug_dump,
                                   verbose=args.verbose, root=in_dir)
        except TranscriptReadError as e:
            print(f"[warn] Failed to parse {fp}: {e.cause}")
            continue
        rows.append(row)
        course_rows.extend(crs)

    with open(args.summary_out, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        writer.writeheader()
        for r in rows:
            writer.writerow(r)

    c_fields = ['transcript_key', 'file'] + COURSE_COLUMNS
    with open(args.out, 'w', newline='', encoding='utf-8') as fc:
        cwriter = csv.DictWriter(fc, fieldnames=c_fields)
        cwriter.writeheader()
        for cr in course_rows:
            cwriter.writerow(cr)

    print(f"Wrote {args.summary_out} (rows={len(rows)}) and {args.out} (rows={len(course_rows)})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
