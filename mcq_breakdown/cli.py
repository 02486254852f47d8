"""
Command-line entry point: build an MCQ breakdown report from a JSON snapshot.

Reads a QuizSnapshot document, runs the aggregation engine and writes the
BreakdownReport as JSON to stdout (or --output). Logs go to stderr.

Exit codes:
    0 - Success
    1 - Input error (unreadable file, invalid snapshot, bad parameters)
    2 - Precondition error during aggregation
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from mcq_breakdown.config import settings
from mcq_breakdown.core import SortSpec, build_breakdown
from mcq_breakdown.domain_types import RoleFilter
from mcq_breakdown.exceptions import InvalidParameterError, PreconditionError
from mcq_breakdown.logging_config import get_logger, setup_logging
from mcq_breakdown.models import QuizSnapshot

logger = get_logger("mcq_breakdown.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcq-breakdown",
        description="Per-question, per-student breakdown of multiple-choice quiz responses.",
    )
    parser.add_argument("snapshot", type=Path, help="Path to a quiz snapshot JSON file")
    parser.add_argument(
        "--group",
        dest="group_ids",
        type=int,
        action="append",
        default=[],
        help="Group id to include (repeatable); 0 selects the whole population",
    )
    parser.add_argument(
        "--filter",
        dest="role_filter",
        choices=[role.value for role in RoleFilter],
        default=settings.DEFAULT_ROLE_FILTER.value,
        help="Include all students or registered students only",
    )
    parser.add_argument(
        "--sort",
        type=int,
        default=settings.DEFAULT_SORT_CODE,
        help="1 lastname, 2 firstname, 3 grade, 4 attempts; negative flips direction",
    )
    parser.add_argument("--output", type=Path, help="Write the report here instead of stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        snapshot = QuizSnapshot.model_validate_json(args.snapshot.read_text(encoding="utf-8"))
        sort = SortSpec.from_code(args.sort)
    except OSError as exc:
        logger.error("Failed to read snapshot %s: %s", args.snapshot, exc)
        return 1
    except ValidationError as exc:
        logger.error("Invalid snapshot %s: %s", args.snapshot, exc)
        return 1
    except InvalidParameterError as exc:
        logger.error("Invalid parameter: %s", exc)
        return 1

    try:
        report = build_breakdown(
            snapshot,
            group_ids=args.group_ids,
            role_filter=RoleFilter(args.role_filter),
            sort=sort,
        )
    except PreconditionError as exc:
        logger.error("Cannot build breakdown for quiz %s: %s", snapshot.quiz.id, exc)
        return 2

    for warning in report.warnings:
        logger.warning("%s", warning)

    payload = report.model_dump_json(indent=2)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote report for quiz %s to %s", snapshot.quiz.id, args.output)
    else:
        print(payload, flush=True)

    return 0


if __name__ == "__main__":
    sys.exit(main())
