# gpa_report.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import pandas as pd

from gpa_metrics import compute_range_gpa, courses_from_frame, summarize


# ==========================================================
# Column model / constants
# ==========================================================
COLUMN_ORDER = ['transcript_key', 'term', 'gpa', 'cumulative_gpa']
RANGE_COLUMNS = ['transcript_key', 'start_term', 'end_term', 'range_gpa']


def _fmt(v: Optional[float]) -> str:
    return 'N/A' if v is None else f"{v:.2f}"


def load_courses(path: str) -> pd.DataFrame:
    # keep_default_na: grade symbols and blank descriptions stay strings
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    if 'transcript_key' not in df.columns:
        df['transcript_key'] = ''
    return df


def quarterly_report(df: pd.DataFrame) -> pd.DataFrame:
    """One row per (transcript, term) with the term GPA and the transcript's cumulative GPA."""
    rows = []
    for key, group in df.groupby('transcript_key', sort=True):
        summary = summarize(courses_from_frame(group))
        for term, gpa in summary.quarterly_gpa:
            rows.append({
                'transcript_key': key,
                'term': term,
                'gpa': round(gpa, 3),
                'cumulative_gpa': round(summary.cumulative_gpa, 3),
            })
    return pd.DataFrame(rows, columns=COLUMN_ORDER)


def range_report(df: pd.DataFrame, start_term: str, end_term: str) -> pd.DataFrame:
    rows = []
    for key, group in df.groupby('transcript_key', sort=True):
        gpa = compute_range_gpa(courses_from_frame(group), start_term, end_term)
        rows.append({
            'transcript_key': key,
            'start_term': start_term,
            'end_term': end_term,
            'range_gpa': '' if gpa is None else round(gpa, 3),
        })
    return pd.DataFrame(rows, columns=RANGE_COLUMNS)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description='Per-term and range GPA from an ingested courses CSV')
    ap.add_argument('--in', dest='inp', required=True)
    ap.add_argument('--out', dest='out', required=True)
    ap.add_argument('--start', default='', help='First term of the range, e.g. "2022 Fall Quarter"')
    ap.add_argument('--end', default='', help='Last term of the range')
    ap.add_argument('--range-out', default=None)
    ap.add_argument('--verbose', action='store_true')
    args = ap.parse_args(argv)

    if bool(args.start) != bool(args.end):
        print('ERROR: --start and --end go together', file=sys.stderr)
        sys.exit(2)

    df = load_courses(args.inp)
    quarterly = quarterly_report(df)
    quarterly.to_csv(args.out, index=False)

    if args.verbose:
        for key, group in quarterly.groupby('transcript_key', sort=True):
            print(f"[quarterly] {key}: " + ', '.join(f"{t}={g:.2f}" for t, g in zip(group['term'], group['gpa'])))

    if args.start:
        ranged = range_report(df, args.start, args.end)
        for key, val in zip(ranged['transcript_key'], ranged['range_gpa']):
            print(f"[range ] {key} {args.start} .. {args.end}: {_fmt(None if val == '' else float(val))}")
        if args.range_out:
            ranged.to_csv(args.range_out, index=False)

    print(f"Wrote {args.out} (rows={len(quarterly)})")
    return 0


if __name__ == '__main__':
    sys.exit(main())
