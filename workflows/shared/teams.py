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


"""Microsoft Teams Incoming Webhook delivery – Adaptive Card payload
building and POSTing a Markdown body to the configured channel.

Teams renders only a limited Markdown subset inside a ``TextBlock`` (bold,
italic, links, simple lists, newlines); anything else is delivered as-is.
"""

import json
import sys
from typing import Any, Dict, List

import requests

from .common import vprint


# ---------------------------------------------------------------------------
# Adaptive Card helpers
# ---------------------------------------------------------------------------

def _text_block(text: str, **kwargs: Any) -> Dict[str, Any]:
    """Return an Adaptive Card TextBlock element."""
    block: Dict[str, Any] = {
        "type": "TextBlock",
        "text": text,
        "wrap": True,
    }
    block.update(kwargs)
    return block


def _build_card_body(
    body: str,
    title: str | None = None,
    subtitle: str | None = None,
) -> List[Dict[str, Any]]:
    elements: List[Dict[str, Any]] = []

    if title:
        header_items: List[Dict[str, Any]] = [
            _text_block(title, weight="Bolder", size="Large"),
        ]
        if subtitle:
            header_items.append(
                _text_block(subtitle, isSubtle=True, spacing="None"),
            )
        elements.append({
            "type": "Container",
            "style": "accent",
            "bleed": True,
            "items": header_items,
        })

    elements.append({
        "type": "Container",
        "separator": bool(title),
        "items": [_text_block(body)],
    })

    return elements


def build_payload(
    body: str,
    title: str | None = None,
    subtitle: str | None = None,
) -> Dict[str, Any]:
    """Build the full webhook JSON payload (Adaptive Card message)."""
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "contentUrl": None,
                "content": {
                    "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
                    "type": "AdaptiveCard",
                    "version": "1.5",
                    "body": _build_card_body(body, title, subtitle),
                },
            }
        ],
    }


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------

def send_to_teams(webhook_url: str, payload: Dict[str, Any]) -> bool:
    """POST *payload* to the Teams Incoming Webhook; return False on failure."""
    try:
        resp = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=30,
        )
    except requests.RequestException as exc:
        print(f"WARN: Teams webhook request failed: {exc}", file=sys.stderr)
        return False

    # Teams webhooks return 200 with body "1" on success.
    if resp.status_code != 200 or resp.text.strip() not in ("1", ""):
        print(
            f"WARN: Teams webhook request failed.\n"
            f"  Status : {resp.status_code}\n"
            f"  Body   : {resp.text}",
            file=sys.stderr,
        )
        return False
    print("Message sent to Teams successfully.")
    return True


def notify_teams(
    webhook_url: str | None,
    body: str,
    *,
    title: str,
    subtitle: str | None = None,
    dry_run: bool = False,
) -> bool:
    """Send *body* to Teams when a webhook is configured."""
    if not webhook_url and not dry_run:
        vprint("No Teams webhook configured – skipping notification")
        return False

    payload = build_payload(body, title=title, subtitle=subtitle)

    if dry_run:
        print("DRY-RUN: Teams payload that would be sent:")
        print(json.dumps(payload, indent=2))
        return False

    return send_to_teams(webhook_url, payload)
