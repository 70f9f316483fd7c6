"""Human-readable text for client log events.

``event_templates.json`` maps each event domain (``irc``, ``framing``,
``keepalive``, ``reader``, ``chat``) to its actions and a ``str.format``
template filled from the keyword context passed to ``logger.log_event``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}
_CATALOG_PATH = Path(__file__).with_name("event_templates.json")


def _flatten(raw: Mapping[str, Any]) -> dict[tuple[str, str], str]:
    templates: dict[tuple[str, str], str] = {}
    for domain, actions in raw.items():
        if not isinstance(domain, str) or not isinstance(actions, Mapping):
            continue
        for action, template in actions.items():
            if isinstance(action, str) and isinstance(template, str):
                templates[(domain, action)] = template
    return templates


def _load_event_templates() -> dict[tuple[str, str], str]:
    """Read the catalog; a missing or broken file yields a single error entry."""
    try:
        raw: Any = json.loads(_CATALOG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}
    return _flatten(raw) if isinstance(raw, Mapping) else {}


def reload_event_templates() -> None:
    global EVENT_TEMPLATES  # noqa: PLW0603
    EVENT_TEMPLATES = _load_event_templates()


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates"]
