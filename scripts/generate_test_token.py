#!/usr/bin/env python3
"""Print smoke-test bearer tokens for a student and a tutor."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.api.deps import issue_smoke_token  # noqa: E402
from src.core.auth import Role  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--student-id", default="student-test")
    parser.add_argument("--tutor-id", default="tutor-test")
    args = parser.parse_args()

    student_token = issue_smoke_token(args.student_id, role=Role.STUDENT)
    print(f"Student Token ({args.student_id}):\n{student_token}\n")

    tutor_token = issue_smoke_token(args.tutor_id, role=Role.TUTOR)
    print(f"Tutor Token ({args.tutor_id}):\n{tutor_token}")


if __name__ == "__main__":
    main()
