"""Public API diffing: removed, changed and added items between two versions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from public_api.engine.items import PublicItem


@dataclass(frozen=True, order=True)
class ChangedPublicItem:
    """An item whose path is unchanged but whose signature differs."""

    old: PublicItem
    new: PublicItem


@dataclass(frozen=True)
class PublicItemsDiff:
    """Three-way partition of two public APIs. Every sequence is sorted."""

    removed: tuple[PublicItem, ...] = ()
    changed: tuple[ChangedPublicItem, ...] = ()
    added: tuple[PublicItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.removed or self.changed or self.added)

    @classmethod
    def between(
        cls,
        old_items: Iterable[PublicItem],
        new_items: Iterable[PublicItem],
        *,
        logger: logging.Logger | None = None,
    ) -> PublicItemsDiff:
        """Diff two collections of public items.

        Items are matched by merging the two sorted collections from their
        high ends, never through sets or hashing: distinct items can render
        identically, and every one of them must land in exactly one bucket.

        Args:
            old_items: Items of the old version, in any order.
            new_items: Items of the new version, in any order.
            logger: If given, both sorted inputs are logged at DEBUG level.
        """
        old_sorted = sorted(old_items)
        new_sorted = sorted(new_items)

        if logger is not None:
            logger.debug("old=%s", [str(i) for i in old_sorted])
            logger.debug("new=%s", [str(i) for i in new_sorted])

        removed: list[PublicItem] = []
        changed: list[ChangedPublicItem] = []
        added: list[PublicItem] = []

        while old_sorted or new_sorted:
            if not new_sorted:
                removed.append(old_sorted.pop())
                continue
            if not old_sorted:
                added.append(new_sorted.pop())
                continue

            old = old_sorted.pop()
            new = new_sorted.pop()
            if old != new and old.path == new.path:
                changed.append(ChangedPublicItem(old=old, new=new))
            elif old < new:
                added.append(new)
                old_sorted.append(old)  # compare again next round
            elif old > new:
                removed.append(old)
                new_sorted.append(new)  # compare again next round
            # equal: unchanged item, drop both

        return cls(
            removed=tuple(sorted(removed)),
            changed=tuple(sorted(changed)),
            added=tuple(sorted(added)),
        )
