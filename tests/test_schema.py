"""Tests for public_api.schema models."""

from __future__ import annotations

import json
from typing import Any

from public_api.schema import ApiDiffOutput, ApiListing, ChangedItem, Meta, export_json_schema


def _minimal_meta() -> dict[str, Any]:
    return {"stats": {"removed": 0, "changed": 0, "added": 0}}


def _minimal_output(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"meta": _minimal_meta()}
    data.update(overrides)
    return data


class TestDefaults:
    def test_minimal_output(self) -> None:
        out = ApiDiffOutput.model_validate(_minimal_output())
        assert out.schema_version == "1.0"
        assert out.removed == []
        assert out.changed == []
        assert out.added == []
        assert not out.has_changes

    def test_meta_defaults(self) -> None:
        meta = Meta.model_validate(_minimal_meta())
        assert meta.old_crate_version is None
        assert meta.new_crate_version is None
        assert meta.timing_ms is None

    def test_listing_defaults(self) -> None:
        listing = ApiListing()
        assert listing.schema_version == "1.0"
        assert listing.items == []


class TestHasChanges:
    def test_removed(self) -> None:
        assert ApiDiffOutput.model_validate(_minimal_output(removed=["pub fn a::f()"])).has_changes

    def test_changed(self) -> None:
        out = ApiDiffOutput.model_validate(
            _minimal_output(changed=[{"old": "pub fn a::f()", "new": "pub fn a::f(x: u8)"}])
        )
        assert out.has_changes
        assert out.changed[0] == ChangedItem(old="pub fn a::f()", new="pub fn a::f(x: u8)")

    def test_added(self) -> None:
        assert ApiDiffOutput.model_validate(_minimal_output(added=["pub fn a::g()"])).has_changes


class TestJsonSchema:
    def test_export_json_schema(self) -> None:
        schema = json.loads(export_json_schema())
        assert "properties" in schema
        for key in ("meta", "removed", "changed", "added"):
            assert key in schema["properties"]

    def test_model_json_schema(self) -> None:
        assert isinstance(ApiListing.model_json_schema(), dict)


class TestRoundTrip:
    def test_round_trip(self) -> None:
        original = ApiDiffOutput.model_validate(
            _minimal_output(
                meta={
                    "old_crate_version": "0.1.0",
                    "new_crate_version": "0.2.0",
                    "stats": {"removed": 1, "changed": 1, "added": 0},
                    "timing_ms": 1.5,
                },
                removed=["pub struct a::S"],
                changed=[{"old": "pub fn a::f()", "new": "pub fn a::f(x: u8)"}],
            )
        )
        restored = ApiDiffOutput.model_validate_json(original.model_dump_json())
        assert original == restored
