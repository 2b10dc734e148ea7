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


"""Version-gate data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum

# Plain ASCII numbers without leading zeros.
VERSION_RE = re.compile(r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)")


class IncrementKind(IntEnum):
    """Severity of a version bump; comparison follows severity."""
    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class EventKind(str, Enum):
    OPENED = "opened"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    SYNCHRONIZE = "synchronize"
    REOPENED = "reopened"
    CLOSED = "closed"


GATE_EVENT_KINDS: frozenset[EventKind] = frozenset({
    EventKind.OPENED,
    EventKind.LABELED,
    EventKind.UNLABELED,
    EventKind.SYNCHRONIZE,
    EventKind.REOPENED,
})


class Route(str, Enum):
    GATE = "gate"
    APPLY = "apply"
    SKIP = "skip"


@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"Version {name} must be a non-negative integer, got {value!r}")

    @classmethod
    def parse(cls, text: str) -> Version:
        match = VERSION_RE.fullmatch((text or "").strip())
        if match is None:
            raise ValueError(f"Not a MAJOR.MINOR.PATCH version: {text!r}")
        return cls(*(int(part) for part in match.groups()))

    def bump(self, kind: IncrementKind) -> Version:
        """Return the version after applying *kind*.

        Higher-order bumps reset the lower-order components to zero.
        """
        if kind is IncrementKind.MAJOR:
            return Version(self.major + 1, 0, 0)
        if kind is IncrementKind.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if kind is IncrementKind.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Cannot bump a version by {kind!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class PullRequestEvent:
    """One pull_request lifecycle notification as delivered by the host."""
    action: str
    labels: list[str]
    merged: bool = False
    number: int | None = None
    base_ref: str = ""
    merge_commit_sha: str | None = None
    repo: str = ""

    @property
    def kind(self) -> EventKind | None:
        try:
            return EventKind(self.action)
        except ValueError:
            return None


@dataclass
class GateResult:
    passed: bool
    increment: IncrementKind
    message: str


@dataclass
class VersionArtifact:
    """The version file as read from disk for a single run."""
    path: str
    table: str
    version: Version
    text: str = field(repr=False)
    span: tuple[int, int] = (0, 0)   # character offsets of the version string in *text*


@dataclass
class ApplyResult:
    increment: IncrementKind
    old_version: Version
    new_version: Version
    commit_sha: str | None
    pushed: bool
