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


"""Label classifier – maps a pull request's labels to an increment decision."""

from __future__ import annotations

from collections.abc import Iterable

from .constants import LABEL_MAJOR_INCREMENT, LABEL_MINOR_INCREMENT, LABEL_PATCH_INCREMENT
from .models import IncrementKind

LABEL_TO_INCREMENT: dict[str, IncrementKind] = {
    LABEL_MAJOR_INCREMENT: IncrementKind.MAJOR,
    LABEL_MINOR_INCREMENT: IncrementKind.MINOR,
    LABEL_PATCH_INCREMENT: IncrementKind.PATCH,
}


def reserved_labels(labels: Iterable[str]) -> list[str]:
    """Return the reserved labels present in *labels*, most severe first."""
    present = {label for label in labels if label in LABEL_TO_INCREMENT}
    return sorted(present, key=lambda label: LABEL_TO_INCREMENT[label], reverse=True)


def classify(labels: Iterable[str]) -> IncrementKind:
    """Return the most severe increment declared by *labels*.

    Non-reserved labels are ignored. When several reserved labels coexist the
    most severe one wins (major > minor > patch); no labels gives ``NONE``.
    """
    result = IncrementKind.NONE
    for label in labels:
        kind = LABEL_TO_INCREMENT.get(label, IncrementKind.NONE)
        if kind > result:
            result = kind
    return result


def labels_from_payload(raw_labels: Iterable[object] | None) -> list[str]:
    """Normalise a GitHub ``labels`` array (dicts or plain strings) to names."""
    names: list[str] = []
    for lbl in raw_labels or []:
        if isinstance(lbl, dict):
            name = lbl.get("name")
        else:
            name = lbl
        if isinstance(name, str) and name.strip():
            names.append(name.strip())
    return names
