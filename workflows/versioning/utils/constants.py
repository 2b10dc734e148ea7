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


"""Domain constants (reserved labels, diagnostics, commit defaults)."""

LABEL_MAJOR_INCREMENT = "major-increment"
LABEL_MINOR_INCREMENT = "minor-increment"
LABEL_PATCH_INCREMENT = "patch-increment"

RESERVED_LABELS: list[str] = [
    LABEL_MAJOR_INCREMENT,
    LABEL_MINOR_INCREMENT,
    LABEL_PATCH_INCREMENT,
]

LABEL_COLORS: dict[str, str] = {
    LABEL_MAJOR_INCREMENT: "b60205",
    LABEL_MINOR_INCREMENT: "fbca04",
    LABEL_PATCH_INCREMENT: "0e8a16",
}

LABEL_DESCRIPTIONS: dict[str, str] = {
    LABEL_MAJOR_INCREMENT: "Merging bumps the major version",
    LABEL_MINOR_INCREMENT: "Merging bumps the minor version",
    LABEL_PATCH_INCREMENT: "Merging bumps the patch version",
}

NO_LABEL_DIAGNOSTIC = "no version increment label set"

DEFAULT_VERSION_FILE = "Cargo.toml"
DEFAULT_VERSION_TABLE = "package"
DEFAULT_MAIN_BRANCH = "master"
DEFAULT_REMOTE = "origin"

COMMIT_MESSAGE = "Bump version"
# Trailer in the commit body; marks which pull request a bump belongs to.
PULL_REQUEST_TRAILER = "Pull-Request: #{number}"
DEFAULT_BOT_NAME = "github-actions[bot]"
DEFAULT_BOT_EMAIL = "41898282+github-actions[bot]@users.noreply.github.com"
