#!/usr/bin/env python3
#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Check that the version increment labels exist in the repository.

Required labels (read by process_pr_event.py):

  major-increment
  minor-increment
  patch-increment

Usage:
  python3 check_labels.py --repo owner/repo
  python3 check_labels.py --repo owner/repo --create
"""

from __future__ import annotations

import argparse
import json
import sys

from shared.common import run_gh

from versioning.utils.constants import LABEL_COLORS, LABEL_DESCRIPTIONS, RESERVED_LABELS


def fetch_repo_labels(repo: str) -> set[str]:
    """Return the set of label names defined in *repo*."""
    result = run_gh(["label", "list", "--repo", repo, "--json", "name", "--limit", "500"])
    if result.returncode != 0:
        print(f"ERROR: failed to list labels for {repo}: {result.stderr}", file=sys.stderr)
        raise SystemExit(1)

    try:
        labels = json.loads(result.stdout or "[]")
    except json.JSONDecodeError as exc:
        print(f"ERROR: failed to parse label JSON: {exc}", file=sys.stderr)
        raise SystemExit(1)

    return {str(item.get("name", "")) for item in labels}


def create_label(repo: str, label: str) -> bool:
    result = run_gh(
        [
            "label",
            "create",
            label,
            "--repo",
            repo,
            "--color",
            LABEL_COLORS.get(label, "ededed"),
            "--description",
            LABEL_DESCRIPTIONS.get(label, ""),
        ]
    )
    if result.returncode != 0:
        print(f"ERROR: failed to create label {label!r} in {repo}: {result.stderr}", file=sys.stderr)
        return False
    print(f"Created label {label!r} in {repo}")
    return True


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Verify that the version increment labels exist in the repository",
    )
    parser.add_argument(
        "--repo",
        required=True,
        help="GitHub repository in owner/repo format",
    )
    parser.add_argument(
        "--create",
        action="store_true",
        help="Create missing labels instead of failing",
    )
    args = parser.parse_args(argv)

    existing = fetch_repo_labels(args.repo)
    missing = [label for label in RESERVED_LABELS if label not in existing]

    if not missing:
        print(f"All {len(RESERVED_LABELS)} required labels exist in {args.repo}")
        raise SystemExit(0)

    if args.create:
        failed = [label for label in missing if not create_label(args.repo, label)]
        raise SystemExit(1 if failed else 0)

    print(f"ERROR: {len(missing)} required label(s) missing in {args.repo}\n", file=sys.stderr)
    print("Missing labels:", file=sys.stderr)
    for label in missing:
        print(f"  - {label}", file=sys.stderr)
    print(f"\nAll required labels:\n  {', '.join(RESERVED_LABELS)}", file=sys.stderr)
    raise SystemExit(1)


if __name__ == "__main__":
    main()
