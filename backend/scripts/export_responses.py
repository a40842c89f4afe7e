"""CLI script to print every stored submission in the admin listing format.
Usage: python scripts/export_responses.py [--out FILE]
"""
import sys
import argparse
import pathlib
from typing import Optional
# Ensure `backend/` is on sys.path so `quiz_api` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from quiz_api.database import engine, create_db_and_tables
from quiz_api.repositories import SubmissionRepository
from quiz_api.utils.formatting import format_responses


def main(out: Optional[pathlib.Path] = None):
    """Render all submissions from the configured database.

    Output goes to stdout, or to `out` when given.
    """
    create_db_and_tables()
    with Session(engine) as session:
        rows = SubmissionRepository(session).list_all()
        text = format_responses(rows)
    if out:
        out.write_text(text, encoding='utf-8')
        print(f'Wrote {len(rows)} submissions to {out}')
    else:
        print(text)


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--out', type=pathlib.Path, help='Write the listing to this file')
    args = parser.parse_args()
    main(out=args.out)
