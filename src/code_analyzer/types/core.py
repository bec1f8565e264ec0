# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""Foundational TypedDicts for dataclass to_dict() returns."""

from __future__ import annotations

from typing import TypedDict


class IssueDict(TypedDict):
    id: str
    line: int | None
    column: int | None
    # Engine labels pass through: Pyright can report "information".
    severity: str
    message: str
    ruleId: str | None
    fixable: bool
