"""public-api output schema (Pydantic v2 models)."""

from __future__ import annotations

import json

from pydantic import BaseModel


class ApiListing(BaseModel):
    """The public API of one crate version, one canonical signature per item."""

    schema_version: str = "1.0"
    items: list[str] = []


class ChangedItem(BaseModel):
    """An item whose signature changed. ``old`` and ``new`` share a path."""

    old: str
    new: str


class DiffStats(BaseModel):
    """Item counts per diff bucket."""

    removed: int
    changed: int
    added: int


class Meta(BaseModel):
    """Run metadata."""

    old_crate_version: str | None = None
    new_crate_version: str | None = None
    stats: DiffStats
    timing_ms: float | None = None


class ApiDiffOutput(BaseModel):
    """Top-level diff output. All lists keep the engine's sorted order."""

    schema_version: str = "1.0"
    meta: Meta
    removed: list[str] = []
    changed: list[ChangedItem] = []
    added: list[str] = []

    @property
    def has_changes(self) -> bool:
        return bool(self.removed or self.changed or self.added)


def export_json_schema() -> str:
    """Export the JSON schema as a string."""
    return json.dumps(ApiDiffOutput.model_json_schema(), indent=2)
