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

"""Shared low-level utilities – logging control, JSON file loading,
and subprocess wrappers for the ``gh`` and ``git`` CLIs.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from typing import Any

_verbose_enabled = False


def parse_runner_debug() -> bool:
    raw = os.getenv("RUNNER_DEBUG")
    if raw is None or raw == "":
        return False
    if raw not in {"0", "1"}:
        raise SystemExit("ERROR: RUNNER_DEBUG must be '0' or '1' when set")
    return raw == "1"


def set_verbose_enabled(value: bool) -> None:
    global _verbose_enabled
    _verbose_enabled = bool(value)


def vprint(msg: str) -> None:
    if _verbose_enabled:
        print(msg)


def load_json_file(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def run_cmd(
    cmd: list[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, check=False, capture_output=capture_output, text=True, cwd=cwd)


def run_gh(args: list[str], *, capture_output: bool = True) -> subprocess.CompletedProcess:
    cmd = ["gh"] + args
    try:
        return run_cmd(cmd, capture_output=capture_output)
    except FileNotFoundError:
        print("ERROR: gh CLI not found. Install and authenticate gh.", file=sys.stderr)
        raise SystemExit(1)


def run_git(
    args: list[str],
    *,
    cwd: str | None = None,
    capture_output: bool = True,
) -> subprocess.CompletedProcess:
    cmd = ["git"] + args
    vprint(f"$ {' '.join(cmd)}")
    try:
        return run_cmd(cmd, capture_output=capture_output, cwd=cwd)
    except FileNotFoundError:
        print("ERROR: git not found on PATH.", file=sys.stderr)
        raise SystemExit(1)
