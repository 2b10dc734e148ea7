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


"""Version file access – locating, reading and rewriting the
``version = "MAJOR.MINOR.PATCH"`` entry of a TOML manifest
(``Cargo.toml`` ``[package]``, ``pyproject.toml`` ``[project]``).

Only the version string is rewritten; every other byte of the file is kept.
"""

from __future__ import annotations

import os
import re

from shared.common import vprint

from .errors import VersionFileError
from .models import Version, VersionArtifact

TABLE_HEADER_RE = re.compile(r"^[ \t]*\[(?P<name>[^\[\]]+)\][ \t]*(?:#[^\r\n]*)?\r?$", re.M)
ANY_HEADER_RE = re.compile(r"^[ \t]*\[", re.M)
VERSION_LINE_RE = re.compile(
    r"""^[ \t]*version[ \t]*=[ \t]*(?P<quote>["'])(?P<value>[^"'\n]*)(?P=quote)""",
    re.M,
)


def _table_bounds(text: str, table: str) -> tuple[int, int] | None:
    """Return the ``(start, end)`` offsets of the body of ``[table]``."""
    for match in TABLE_HEADER_RE.finditer(text):
        if match.group("name").strip() != table:
            continue
        start = match.end()
        nxt = ANY_HEADER_RE.search(text, start)
        end = nxt.start() if nxt else len(text)
        return start, end
    return None


def parse_version_artifact(text: str, table: str, path: str = "<memory>") -> VersionArtifact:
    bounds = _table_bounds(text, table)
    if bounds is None:
        raise VersionFileError(path, f"table [{table}] not found")

    start, end = bounds
    match = VERSION_LINE_RE.search(text, start, end)
    if match is None:
        raise VersionFileError(path, f"no version key in table [{table}]")

    try:
        version = Version.parse(match.group("value"))
    except ValueError as exc:
        raise VersionFileError(path, str(exc)) from exc

    return VersionArtifact(
        path=path,
        table=table,
        version=version,
        text=text,
        span=match.span("value"),
    )


def load_version_artifact(path: str, table: str) -> VersionArtifact:
    """Read *path* from disk and locate the version in ``[table]``."""
    if not os.path.isfile(path):
        raise VersionFileError(path, "file does not exist")
    with open(path, "r", encoding="utf-8", newline="") as fh:
        text = fh.read()
    artifact = parse_version_artifact(text, table, path)
    vprint(f"Read version {artifact.version} from {path} [{table}]")
    return artifact


def render_version_artifact(artifact: VersionArtifact, new_version: Version) -> str:
    start, end = artifact.span
    return artifact.text[:start] + str(new_version) + artifact.text[end:]


def write_version_artifact(artifact: VersionArtifact, new_version: Version) -> None:
    """Overwrite the artifact file with *new_version* in place of the old one."""
    text = render_version_artifact(artifact, new_version)
    with open(artifact.path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    vprint(f"Wrote version {new_version} to {artifact.path}")
