"""Event logger used throughout the client."""

from __future__ import annotations

import logging
import os


class ChatLogger:
    """Thin wrapper around a stdlib logger that emits catalogued events.

    Events are addressed by ``(domain, action)``; the human text is looked up
    in ``event_templates.json`` and formatted with the keyword context. With
    ``DEBUG`` set in the environment the remaining context is appended.
    Output handling is left to the application (see ``logging_config``).
    """

    def __init__(self, name: str = "twitch_chat") -> None:
        self._event_name_width = 32
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            # Local import to avoid cyclic import issues during module init.
            from .event_catalog import EVENT_TEMPLATES as _event_templates

            template = _event_templates.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        kw: dict[str, object] = dict(kwargs)
        user = kw.pop("user", None)
        prefix = self._build_prefix(user if isinstance(user, str) else None)
        if self._is_debug_enabled():
            msg = self._build_debug_message(event_name, prefix, human_text, kw)
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _is_debug_enabled() -> bool:
        return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")

    @staticmethod
    def _build_prefix(user: str | None) -> str:
        padded = (user or "system").ljust(16)[:16]
        return f"[{padded}]"

    def _build_debug_message(
        self,
        event_name: str,
        prefix: str,
        human_text: str,
        kwargs: dict[str, object],
    ) -> str:
        width = self._event_name_width
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:
            ev = event_name[: width - 1] + "…"
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        base = f"{ev} {prefix} {human_text}"
        if context:
            base = f"{base} ({context})"
        return base


logger = ChatLogger()
