"""Structured per-scenario action log with sensitive-field redaction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterator, Mapping

logger = logging.getLogger("ui-scenarios.actions")

REDACTED = "***"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "new_password",
        "confirm_password",
        "current_password",
        "temp_password",
        "secret",
        "token",
        "api_key",
    }
)


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return lowered in SENSITIVE_KEYS or "password" in lowered or lowered.endswith("_token")


def redact(params: Mapping[str, Any], extra_sensitive: frozenset[str] = frozenset()) -> dict[str, Any]:
    """Return a copy of *params* with sensitive values masked."""
    cleaned: dict[str, Any] = {}
    for key, value in params.items():
        if key in extra_sensitive or is_sensitive(key):
            cleaned[key] = REDACTED
        elif isinstance(value, Mapping):
            cleaned[key] = redact(value, extra_sensitive)
        else:
            cleaned[key] = value
    return cleaned


@dataclass(frozen=True)
class ActionEntry:
    """One recorded step."""

    step: str
    params: Mapping[str, Any]
    page: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def render(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
        where = f"[{self.page}] " if self.page else ""
        return f"{self.timestamp.strftime('%H:%M:%S.%f')[:-3]} {where}{self.step}({args})"


class ActionLog:
    """Append-only trail of the actions issued during one scenario."""

    def __init__(self, scenario: str = "") -> None:
        self.scenario = scenario
        self._entries: list[ActionEntry] = []

    def record(
        self,
        step: str,
        params: Mapping[str, Any] | None = None,
        *,
        page: str = "",
        sensitive: frozenset[str] = frozenset(),
    ) -> ActionEntry:
        """Append one entry and emit it as a structured INFO record."""
        entry = ActionEntry(
            step=step,
            params=MappingProxyType(redact(params or {}, sensitive)),
            page=page,
        )
        self._entries.append(entry)
        logger.info(
            "%s %s",
            step,
            dict(entry.params),
            extra={"step": step, "params": dict(entry.params), "page": page, "scenario": self.scenario},
        )
        return entry

    @property
    def entries(self) -> tuple[ActionEntry, ...]:
        return tuple(self._entries)

    def steps(self) -> list[str]:
        return [entry.step for entry in self._entries]

    def render(self) -> str:
        """Narrative form attached to failure reports."""
        header = f"Action log for {self.scenario}" if self.scenario else "Action log"
        lines = [header, *(f"  {index:>3}. {entry.render()}" for index, entry in enumerate(self._entries, 1))]
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ActionEntry]:
        return iter(tuple(self._entries))
