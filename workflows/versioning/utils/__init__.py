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


"""Version increment gating and application utilities.

Modules
-------
constants       Domain constants (reserved labels, diagnostic, commit defaults).
models          Core types (IncrementKind, Version, PullRequestEvent, GateResult, VersionArtifact).
errors          Structured error catalog (policy violation, conflict, missing precondition, ...).
classifier      Label set -> IncrementKind (most severe reserved label wins).
events          ``pull_request`` payload / ``gh pr view`` JSON parsing.
version_file    Locating, reading and rewriting the version in a TOML manifest.
gate            Non-mutating label gate and event routing.
applicator      Merge-time bump, single-file commit and push.
"""
