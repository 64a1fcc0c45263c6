# run_pipeline.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import subprocess
import sys
from typing import List, Optional


def run(cmd: list[str]):
    print(">>>", " ".join(cmd))
    rc = subprocess.call(cmd)
    if rc != 0:
        sys.exit(rc)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser()
    # Step 1: ingest
    p.add_argument('--in-dir', dest='in_dir', default=None)
    p.add_argument('--folder', dest='folder', default=None)     # alias
    p.add_argument('--glob', default="*.pdf;*.txt")
    p.add_argument('--recursive', action='store_true')
    p.add_argument('--tolerance', default=None)
    p.add_argument('--term-regex', default=None)
    p.add_argument('--debug-dump', default=None)
    p.add_argument('--verbose', action='store_true')
    p.add_argument('--courses', default='_tmp_courses.csv')
    p.add_argument('--summary-out', required=True)

    # Step 2: report
    p.add_argument('--quarterly-out', required=True)
    p.add_argument('--start', default=None)
    p.add_argument('--end', default=None)
    p.add_argument('--range-out', default=None)

    args = p.parse_args(argv)

    in_dir = args.in_dir or args.folder
    if not in_dir:
        print('ERROR: --in-dir/--folder is required', file=sys.stderr)
        sys.exit(2)

    cmd0 = [sys.executable, '-m', 'bulk_ingest',
            '--in-dir', in_dir,
            '--glob', args.glob,
            '--out', args.courses,
            '--summary-out', args.summary_out]
    if args.recursive:
        cmd0.append('--recursive')
    if args.tolerance is not None:
        cmd0 += ['--tolerance', str(args.tolerance)]
    if args.term_regex:
        cmd0 += ['--term-regex', args.term_regex]
    if args.debug_dump:
        cmd0 += ['--debug-dump', args.debug_dump]
    if args.verbose:
        cmd0.append('--verbose')
    run(cmd0)

    cmd1 = [sys.executable, '-m', 'gpa_report',
            '--in', args.courses,
            '--out', args.quarterly_out]
    if args.start and args.end:
        cmd1 += ['--start', args.start, '--end', args.end]
        if args.range_out:
            cmd1 += ['--range-out', args.range_out]
    if args.verbose:
        cmd1.append('--verbose')
    run(cmd1)

    print("Pipeline completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
