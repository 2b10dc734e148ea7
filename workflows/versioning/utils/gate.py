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


"""Version gate – the non-mutating label check run on every pull request
lifecycle event, and the routing of events to the gate or apply path.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable

from shared.common import vprint

from .classifier import classify, reserved_labels
from .constants import NO_LABEL_DIAGNOSTIC
from .models import GATE_EVENT_KINDS, EventKind, GateResult, IncrementKind, PullRequestEvent, Route


def warn_if_ambiguous(labels: Iterable[str]) -> None:
    present = reserved_labels(labels)
    if len(present) > 1:
        print(
            f"WARN: several version increment labels set ({', '.join(present)}); "
            f"using the most severe: {present[0]}",
            file=sys.stderr,
        )


def evaluate_gate(labels: Iterable[str]) -> GateResult:
    """Pass when the labels declare an increment, fail otherwise.

    Each evaluation looks only at *labels*; nothing is remembered between calls.
    """
    labels = list(labels)
    warn_if_ambiguous(labels)
    increment = classify(labels)
    if increment is IncrementKind.NONE:
        return GateResult(passed=False, increment=increment, message=NO_LABEL_DIAGNOSTIC)
    return GateResult(
        passed=True,
        increment=increment,
        message=f"version increment: {increment.label}",
    )


def route_event(event: PullRequestEvent, main_branch: str) -> Route:
    if event.base_ref and event.base_ref != main_branch:
        vprint(f"Pull request targets {event.base_ref!r}, not {main_branch!r} – skipping")
        return Route.SKIP

    kind = event.kind
    if kind in GATE_EVENT_KINDS:
        return Route.GATE
    if kind is EventKind.CLOSED:
        return Route.APPLY if event.merged else Route.SKIP

    vprint(f"Action {event.action!r} does not affect the version gate – skipping")
    return Route.SKIP
