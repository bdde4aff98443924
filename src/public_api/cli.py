"""public-api CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from public_api import __version__
from public_api.engine.pipeline import diff_public_apis, public_api_from_rustdoc_json_str
from public_api.schema import ApiDiffOutput, ApiListing

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0  # No API difference (or listing printed)
EXIT_FINDINGS = 1  # The public API changed
EXIT_ERROR = 2  # Something went wrong

_RUSTDOC_JSON = click.Path(exists=True, dir_okay=False, path_type=Path)


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _format_diff_text(output: ApiDiffOutput) -> str:
    """Plain-text rendering of a diff, one section per bucket."""
    sections: list[tuple[str, list[str]]] = [
        ("Removed items from the public API", [f"-{s}" for s in output.removed]),
        (
            "Changed items in the public API",
            [line for c in output.changed for line in (f"-{c.old}", f"+{c.new}")],
        ),
        ("Added items to the public API", [f"+{s}" for s in output.added]),
    ]
    lines: list[str] = []
    for title, body in sections:
        lines.append(title)
        lines.append("=" * len(title))
        lines.extend(body or ["(none)"])
        lines.append("")
    return "\n".join(lines).rstrip()


@click.group()
@click.version_option(__version__, "--version", "-v")
def main() -> None:
    """public-api: list and diff the public API of a Rust crate from its rustdoc JSON."""


@main.command("list")
@click.argument("rustdoc_json", type=_RUSTDOC_JSON)
@click.option(
    "--with-blanket-implementations",
    is_flag=True,
    default=False,
    help="Include items from blanket impls such as `impl<T> From<T> for T`.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def list_items(rustdoc_json: Path, with_blanket_implementations: bool, fmt: str) -> None:
    """Print the public API of a crate, one item per line.

    RUSTDOC_JSON: File written by `cargo rustdoc -- -Z unstable-options --output-format json`.
    """
    try:
        items = public_api_from_rustdoc_json_str(
            _read(rustdoc_json),
            with_blanket_implementations=with_blanket_implementations,
            sorted_output=True,
        )
        lines = [str(i) for i in items]
        if fmt == "json":
            click.echo(ApiListing(items=lines).model_dump_json(indent=2))
        else:
            for line in lines:
                click.echo(line)
        sys.exit(EXIT_SUCCESS)

    except SystemExit:
        raise
    except Exception as exc:
        logger.debug("CLI error", exc_info=True)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_ERROR)


@main.command()
@click.argument("old_json", type=_RUSTDOC_JSON)
@click.argument("new_json", type=_RUSTDOC_JSON)
@click.option(
    "--with-blanket-implementations",
    is_flag=True,
    default=False,
    help="Include items from blanket impls such as `impl<T> From<T> for T`.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: 'text' for a readable report, 'json' for structured output.",
)
@click.option(
    "--debug-diff",
    is_flag=True,
    default=False,
    help="Log the sorted inputs of the diff to stderr.",
)
def diff(
    old_json: Path,
    new_json: Path,
    with_blanket_implementations: bool,
    fmt: str,
    debug_diff: bool,
) -> None:
    """Diff the public API between two versions of a crate.

    OLD_JSON, NEW_JSON: rustdoc JSON of the old and the new version.

    \b
    Exit codes:
      0  Public API unchanged
      1  Items removed, changed or added (read the output)
      2  Error
    """
    try:
        diagnostics: logging.Logger | None = None
        if debug_diff:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
            diagnostics = logging.getLogger("public_api.diff")

        output = diff_public_apis(
            _read(old_json),
            _read(new_json),
            with_blanket_implementations=with_blanket_implementations,
            diagnostics=diagnostics,
        )

        if fmt == "json":
            click.echo(output.model_dump_json(indent=2))
        else:
            click.echo(_format_diff_text(output))

        sys.exit(EXIT_FINDINGS if output.has_changes else EXIT_SUCCESS)

    except SystemExit:
        raise
    except Exception as exc:
        logger.debug("CLI error", exc_info=True)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_ERROR)


@main.command("schema")
def schema() -> None:
    """Print the JSON schema of `diff --format json` output."""
    from public_api.schema import export_json_schema

    click.echo(export_json_schema())
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
