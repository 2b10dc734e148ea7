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


"""Pull request event parsing – turns a GitHub ``pull_request`` webhook
payload (or ``gh pr view`` JSON) into a :class:`PullRequestEvent`.
"""

from __future__ import annotations

import json
import os
from typing import Any

from shared.common import load_json_file

from .classifier import labels_from_payload
from .errors import EventPayloadError
from .models import PullRequestEvent


def _optional_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_pull_request_event(payload: dict[str, Any]) -> PullRequestEvent:
    pr = payload.get("pull_request")
    if not isinstance(pr, dict):
        raise EventPayloadError("missing 'pull_request' object")

    action = payload.get("action")
    if not isinstance(action, str) or not action:
        raise EventPayloadError("missing 'action'")

    base = pr.get("base") or {}
    repository = payload.get("repository") or {}

    return PullRequestEvent(
        action=action,
        labels=labels_from_payload(pr.get("labels")),
        merged=bool(pr.get("merged")),
        number=_optional_int(pr.get("number") or payload.get("number")),
        base_ref=str(base.get("ref") or "") if isinstance(base, dict) else "",
        merge_commit_sha=pr.get("merge_commit_sha") or None,
        repo=str(repository.get("full_name") or "") if isinstance(repository, dict) else "",
    )


def load_pull_request_event(path: str | None) -> PullRequestEvent:
    """Load and parse the event file at *path* (usually ``$GITHUB_EVENT_PATH``)."""
    if not path:
        raise EventPayloadError("no event path given (GITHUB_EVENT_PATH is unset)")
    if not os.path.isfile(path):
        raise EventPayloadError(f"event file not found: {path}")
    try:
        payload = load_json_file(path)
    except json.JSONDecodeError as exc:
        raise EventPayloadError(f"invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise EventPayloadError(f"event file {path} does not hold a JSON object")
    return parse_pull_request_event(payload)


def event_from_pr_view(data: dict[str, Any], repo: str) -> PullRequestEvent:
    """Build a synthetic ``closed`` event from ``gh pr view --json`` output.

    Used for manual re-runs of the apply path after a failed automation run.
    """
    merge_commit = data.get("mergeCommit") or {}
    return PullRequestEvent(
        action="closed",
        labels=labels_from_payload(data.get("labels")),
        merged=str(data.get("state") or "").upper() == "MERGED",
        number=_optional_int(data.get("number")),
        base_ref=str(data.get("baseRefName") or ""),
        merge_commit_sha=(merge_commit.get("oid") if isinstance(merge_commit, dict) else None) or None,
        repo=repo,
    )
