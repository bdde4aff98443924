"""End-to-end pipeline: rustdoc JSON to public items to ApiDiffOutput."""

from __future__ import annotations

import logging
import time

from public_api.engine._types import Crate
from public_api.engine.diff import PublicItemsDiff
from public_api.engine.items import PublicItem, public_items
from public_api.rustdoc import load_crate
from public_api.schema import ApiDiffOutput, ChangedItem, DiffStats, Meta

logger = logging.getLogger(__name__)


def public_api_from_rustdoc_json_str(
    rustdoc_json: str,
    *,
    with_blanket_implementations: bool = False,
    sorted_output: bool = False,
) -> list[PublicItem]:
    """List the public API of the crate described by *rustdoc_json*.

    Args:
        rustdoc_json: Raw rustdoc JSON text.
        with_blanket_implementations: Include items of blanket impls such as
            ``impl<T> Any for T``. They are noise in most listings.
        sorted_output: Sort the result in public item order.

    Raises:
        RustdocJsonError: the JSON could not be parsed.
    """
    crate = load_crate(rustdoc_json)
    return _render_crate(
        crate,
        with_blanket_implementations=with_blanket_implementations,
        sorted_output=sorted_output,
    )


def diff_public_apis(
    old_rustdoc_json: str,
    new_rustdoc_json: str,
    *,
    with_blanket_implementations: bool = False,
    diagnostics: logging.Logger | None = None,
) -> ApiDiffOutput:
    """Diff the public APIs of two versions of a crate.

    Args:
        old_rustdoc_json: rustdoc JSON of the old version.
        new_rustdoc_json: rustdoc JSON of the new version.
        diagnostics: Optional logger that receives the sorted inputs of
            the diff at DEBUG level.

    Returns:
        Fully populated :class:`ApiDiffOutput`.
    """
    t0 = time.monotonic()

    old_crate = load_crate(old_rustdoc_json)
    new_crate = load_crate(new_rustdoc_json)
    old_items = _render_crate(old_crate, with_blanket_implementations=with_blanket_implementations)
    new_items = _render_crate(new_crate, with_blanket_implementations=with_blanket_implementations)

    diff = PublicItemsDiff.between(old_items, new_items, logger=diagnostics)

    elapsed_ms = (time.monotonic() - t0) * 1000
    meta = Meta(
        old_crate_version=old_crate.crate_version,
        new_crate_version=new_crate.crate_version,
        stats=DiffStats(
            removed=len(diff.removed),
            changed=len(diff.changed),
            added=len(diff.added),
        ),
        timing_ms=round(elapsed_ms, 2),
    )

    return ApiDiffOutput(
        meta=meta,
        removed=[str(i) for i in diff.removed],
        changed=[ChangedItem(old=str(c.old), new=str(c.new)) for c in diff.changed],
        added=[str(i) for i in diff.added],
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _render_crate(
    crate: Crate,
    *,
    with_blanket_implementations: bool = False,
    sorted_output: bool = False,
) -> list[PublicItem]:
    items = [
        i.render(crate)
        for i in public_items(crate, with_blanket_implementations=with_blanket_implementations)
    ]
    logger.debug("Rendered %d public items", len(items))
    if sorted_output:
        items.sort()
    return items
