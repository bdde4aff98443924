"""End-to-end tests: rustdoc JSON in, listings and diffs out."""

from __future__ import annotations

import logging

import pytest

from public_api import diff_public_apis, public_api_from_rustdoc_json_str
from public_api.rustdoc import RustdocJsonError

V1 = ("rustdoc", "example_api-v0.1.0.json")
V2 = ("rustdoc", "example_api-v0.2.0.json")
COMPREHENSIVE = ("rustdoc", "comprehensive_api.json")


class TestListing:
    def test_v1_listing(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        items = public_api_from_rustdoc_json_str(load_fixture(*V1), sorted_output=True)
        assert [str(i) for i in items] == [
            "pub mod example_api",
            "pub struct example_api::Struct",
            "pub struct field example_api::Struct::field: usize",
            "pub fn example_api::function(v1_param: Struct)",
        ]

    def test_unsorted_is_walk_order(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        items = public_api_from_rustdoc_json_str(load_fixture(*V1))
        assert str(items[0]) == "pub mod example_api"
        assert sorted(items) == public_api_from_rustdoc_json_str(load_fixture(*V1), sorted_output=True)

    def test_comprehensive_listing(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        expected = load_fixture("rustdoc", "comprehensive_api.txt").splitlines()
        items = public_api_from_rustdoc_json_str(load_fixture(*COMPREHENSIVE), sorted_output=True)
        assert [str(i) for i in items] == expected

    def test_comprehensive_with_blanket_implementations(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        expected = load_fixture("rustdoc", "comprehensive_api.txt").splitlines()
        plain = expected.index("pub struct comprehensive_api::Plain<T>")
        expected.insert(plain + 1, "pub fn comprehensive_api::Plain::from(t: T) -> T")
        items = public_api_from_rustdoc_json_str(
            load_fixture(*COMPREHENSIVE),
            with_blanket_implementations=True,
            sorted_output=True,
        )
        assert [str(i) for i in items] == expected

    def test_invalid_input(self) -> None:
        with pytest.raises(RustdocJsonError):
            public_api_from_rustdoc_json_str("not json")


class TestDiff:
    def test_v1_to_v2(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        output = diff_public_apis(load_fixture(*V1), load_fixture(*V2))
        assert output.removed == []
        assert [(c.old, c.new) for c in output.changed] == [
            (
                "pub fn example_api::function(v1_param: Struct)",
                "pub fn example_api::function(v1_param: Struct, v2_param: usize)",
            )
        ]
        assert output.added == [
            "pub struct field example_api::Struct::v2_field: usize",
            "pub struct example_api::StructV2",
            "pub struct field example_api::StructV2::field: usize",
        ]
        assert output.has_changes

    def test_v2_to_v1(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        output = diff_public_apis(load_fixture(*V2), load_fixture(*V1))
        assert output.removed == [
            "pub struct field example_api::Struct::v2_field: usize",
            "pub struct example_api::StructV2",
            "pub struct field example_api::StructV2::field: usize",
        ]
        assert [(c.old, c.new) for c in output.changed] == [
            (
                "pub fn example_api::function(v1_param: Struct, v2_param: usize)",
                "pub fn example_api::function(v1_param: Struct)",
            )
        ]
        assert output.added == []

    def test_meta(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        output = diff_public_apis(load_fixture(*V1), load_fixture(*V2))
        assert output.meta.old_crate_version == "0.1.0"
        assert output.meta.new_crate_version == "0.2.0"
        assert (output.meta.stats.removed, output.meta.stats.changed, output.meta.stats.added) == (0, 1, 3)
        assert output.meta.timing_ms is not None
        assert output.meta.timing_ms >= 0

    def test_no_change(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        output = diff_public_apis(load_fixture(*COMPREHENSIVE), load_fixture(*COMPREHENSIVE))
        assert not output.has_changes
        assert output.meta.stats.added == 0

    def test_blanket_implementations_flag(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        text = load_fixture(*COMPREHENSIVE)
        assert not diff_public_apis(text, text, with_blanket_implementations=True).has_changes

    def test_diagnostics_logger(self, load_fixture, caplog: pytest.LogCaptureFixture) -> None:  # type: ignore[no-untyped-def]
        diagnostics = logging.getLogger("public_api.diff")
        with caplog.at_level(logging.DEBUG, logger="public_api.diff"):
            diff_public_apis(load_fixture(*V1), load_fixture(*V2), diagnostics=diagnostics)
        messages = [r.getMessage() for r in caplog.records if r.name == "public_api.diff"]
        assert len(messages) == 2
        assert messages[0].startswith("old=['pub mod example_api'")
        assert messages[1].startswith("new=['pub mod example_api'")

    def test_invalid_new_version(self, load_fixture) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(RustdocJsonError):
            diff_public_apis(load_fixture(*V1), "{}")
