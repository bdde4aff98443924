"""Diff and rendering performance benchmarks."""

from __future__ import annotations

from typing import Any

from public_api.engine.diff import PublicItemsDiff
from public_api.engine.items import PublicItem
from public_api.engine.pipeline import public_api_from_rustdoc_json_str
from public_api.engine.tokens import WS, Token


def _generate_api(count: int, params: int) -> list[PublicItem]:
    """``count`` functions spread over modules, each with ``params`` parameters."""
    items: list[PublicItem] = []
    for i in range(count):
        module = f"m{i % 25}"
        name = f"function_{i}"
        tokens: list[Token] = [
            Token.qualifier("pub"),
            WS,
            Token.kind_("fn"),
            WS,
            Token.identifier("krate"),
            Token.symbol("::"),
            Token.identifier(module),
            Token.symbol("::"),
            Token.function(name),
            Token.symbol("("),
        ]
        for p in range(params):
            if p:
                tokens.extend([Token.symbol(","), WS])
            tokens.extend([Token.identifier(f"p{p}"), Token.symbol(":"), WS, Token.primitive("usize")])
        tokens.append(Token.symbol(")"))
        items.append(PublicItem(path=("krate", module, name), tokens=tuple(tokens)))
    return items


OLD_API = _generate_api(5000, 2)
NEW_API = _generate_api(5000, 2)[500:] + _generate_api(6000, 3)[5000:] + _generate_api(200, 3)


def test_diff_large(benchmark_config: Any) -> None:
    """Benchmark diffing two ~5000 item APIs."""
    diff = benchmark_config(PublicItemsDiff.between, OLD_API, NEW_API)
    assert len(diff.changed) == 200
    assert len(diff.removed) == 300
    assert len(diff.added) == 1000


def test_diff_identical(benchmark_config: Any) -> None:
    """Benchmark diffing an API against itself."""
    diff = benchmark_config(PublicItemsDiff.between, OLD_API, OLD_API)
    assert diff.is_empty


def test_listing_fixture(benchmark_config: Any, load_fixture: Any) -> None:
    """Benchmark loading and rendering a rustdoc JSON file."""
    text = load_fixture("rustdoc", "comprehensive_api.json")
    items = benchmark_config(public_api_from_rustdoc_json_str, text, sorted_output=True)
    assert len(items) == 15
