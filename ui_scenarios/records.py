"""Immutable test data records and the tables that drive scenarios."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

import pytest


@dataclass(frozen=True)
class ExpectedOutcome:
    """What a scenario should observe after Act.

    ``message`` is a category key from the configured message patterns
    (``success``, ``field_error``...) or a literal regular expression.
    """

    success: bool
    message: str | None = None
    error_field: str | None = None
    field_states: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_states", MappingProxyType(dict(self.field_states)))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ExpectedOutcome:
        return cls(
            success=bool(payload["success"]),
            message=payload.get("message"),
            error_field=payload.get("error_field"),
            field_states=payload.get("field_states") or {},
        )


@dataclass(frozen=True)
class TestDataRecord:
    """One row of input/expected-output data driving one scenario run."""

    __test__ = False

    description: str
    inputs: Mapping[str, Any]
    expected: ExpectedOutcome
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", MappingProxyType(dict(self.inputs)))
        object.__setattr__(self, "tags", tuple(self.tags))

    def __getitem__(self, key: str) -> Any:
        return self.inputs[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.inputs.get(key, default)

    @property
    def record_id(self) -> str:
        """Slug of the description, used as the pytest parameter id."""
        slug = re.sub(r"[^a-z0-9]+", "-", self.description.lower()).strip("-")
        return slug or "record"

    def with_inputs(self, **overrides: Any) -> TestDataRecord:
        return replace(self, inputs={**self.inputs, **overrides})

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> TestDataRecord:
        return cls(
            description=payload["description"],
            inputs=payload.get("inputs") or {},
            expected=ExpectedOutcome.from_dict(payload["expected"]),
            tags=tuple(payload.get("tags") or ()),
        )


class RecordTable:
    """Ordered collection of records with unique ids."""

    def __init__(self, records: Iterable[TestDataRecord]) -> None:
        self._records = tuple(records)
        seen: set[str] = set()
        for record in self._records:
            if record.record_id in seen:
                raise ValueError(f"Duplicate record id '{record.record_id}' in table")
            seen.add(record.record_id)

    def __iter__(self) -> Iterator[TestDataRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def positives(self) -> list[TestDataRecord]:
        return [record for record in self._records if record.expected.success]

    def negatives(self) -> list[TestDataRecord]:
        return [record for record in self._records if not record.expected.success]

    def tagged(self, tag: str) -> list[TestDataRecord]:
        return [record for record in self._records if tag in record.tags]

    def params(self) -> list[Any]:
        """``pytest.param`` entries with readable ids, for ``parametrize``."""
        return [
            pytest.param(record, id=record.record_id, marks=[getattr(pytest.mark, tag) for tag in record.tags])
            for record in self._records
        ]


def load_table(path: str | Path, name: str = "records") -> RecordTable:
    """Load a JSON table: ``{name: [{"description", "inputs", "expected", "tags"}]}``.

    A file may hold several named tables; a bare JSON list is one table.
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    rows = payload[name] if isinstance(payload, dict) else payload
    return RecordTable(TestDataRecord.from_dict(row) for row in rows)


def unique_address(email: str, token: str) -> str:
    """Plus-address *email* with *token* so each run owns a distinct mailbox."""
    if not token or "@" not in email:
        return email
    local, domain = email.split("@", 1)
    return f"{local}+{token}@{domain}"
