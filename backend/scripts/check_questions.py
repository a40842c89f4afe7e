"""CLI script to validate the question bank before deploying it.
Usage: python scripts/check_questions.py [--path FILE]
"""
import sys
import argparse
import pathlib
from typing import Optional
# Ensure `backend/` is on sys.path so `quiz_api` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from quiz_api.config import settings
from quiz_api.errors import QuestionBankError
from quiz_api.utils.question_bank import load_questions


def main(path: Optional[pathlib.Path] = None) -> int:
    """Load the bank at `path` (default: configured QUESTIONS_PATH) and print a summary.

    Returns a process exit code: 0 when the bank is valid.
    """
    path = path or settings.QUESTIONS_PATH
    try:
        questions = load_questions(path)
    except QuestionBankError:
        print(f'Question bank invalid or missing: {path}')
        return 1
    problems = 0
    for q in questions:
        values = [o.value for o in q.options]
        if q.correct_answer not in values:
            print(f'{q.id}: correct answer {q.correct_answer!r} is not one of the options {values}')
            problems += 1
        if len(set(values)) != len(values):
            print(f'{q.id}: duplicate option values {values}')
            problems += 1
    print(f'{len(questions)} questions loaded from {path}, {problems} problems')
    return 1 if problems else 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--path', type=pathlib.Path, help='Question bank JSON file to check')
    args = parser.parse_args()
    sys.exit(main(path=args.path))
