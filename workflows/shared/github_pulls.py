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


"""GitHub pull request operations – metadata lookup through the ``gh`` CLI
and PR comments through PyGithub.
"""

import json
import sys
from typing import Any

from github import Github

from .common import run_gh, vprint


def gh_pr_view(repo: str, number: int) -> dict[str, Any] | None:
    """Return ``gh pr view`` JSON for pull request *number*, or None on failure."""
    res = run_gh(
        [
            "pr",
            "view",
            str(number),
            "--repo",
            repo,
            "--json",
            "number,labels,state,baseRefName,mergeCommit",
        ]
    )
    if res.returncode != 0:
        print(f"Failed to view pull request #{number}: {res.stderr}", file=sys.stderr)
        return None

    try:
        data = json.loads(res.stdout or "{}")
    except json.JSONDecodeError as exc:
        print(f"ERROR: failed to parse pull request JSON: {exc}", file=sys.stderr)
        return None

    return data if isinstance(data, dict) else None


def gh_pr_comment(token: str, repo: str, number: int, body: str) -> bool:
    """Post *body* as a comment on pull request *number*."""
    try:
        gh = Github(token)
        pull = gh.get_repo(repo).get_pull(number)
        pull.create_issue_comment(body)
    except Exception as exc:
        print(f"WARN: Failed to comment on #{number}: {exc}", file=sys.stderr)
        return False

    vprint(f"Commented on pull request #{number}")
    return True
