"""Public items: a resolved path plus its rendered signature.

Also walks a crate from its root module to find every publicly reachable
item and the path (with effective names) it is reachable through.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from public_api.engine._types import (
    Crate,
    Enum,
    Impl,
    Import,
    Item,
    Module,
    Struct,
    StructVariant,
    Trait,
    Union,
    Variant,
)
from public_api.engine.render import token_stream
from public_api.engine.tokens import Token, tokens_to_string

logger = logging.getLogger(__name__)

_VISIBLE = frozenset({"public", "default"})


@dataclass(frozen=True)
class PathComponent:
    """One path segment: the item it names and its effective (display) name."""

    item: Item
    name: str


@dataclass(frozen=True)
class IntermediatePublicItem:
    """An AST item together with the path it was reached through.

    The last path component is the item itself.
    """

    item: Item
    path: tuple[PathComponent, ...]

    def path_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.path)

    def render(self, crate: Crate) -> PublicItem:
        return PublicItem(path=self.path_names(), tokens=tuple(token_stream(crate, self)))


@dataclass(frozen=True, order=True)
class PublicItem:
    """A public API item.

    Ordered by ``path``, then ``tokens``. Two items with the same path but
    different tokens are the same item whose signature changed.
    """

    path: tuple[str, ...]
    tokens: tuple[Token, ...]

    def __str__(self) -> str:
        return tokens_to_string(self.tokens)


def public_items(
    crate: Crate,
    *,
    with_blanket_implementations: bool = False,
) -> Iterator[IntermediatePublicItem]:
    """Yield every publicly reachable item of *crate*, depth first from the root."""
    root = crate.index.get(crate.root)
    if root is None:
        logger.debug("Root item %s missing from index", crate.root)
        return
    yield from _walk(crate, root, (), None, with_blanket_implementations)


def _walk(
    crate: Crate,
    item: Item,
    parent: tuple[PathComponent, ...],
    name_override: str | None,
    with_blanket: bool,
) -> Iterator[IntermediatePublicItem]:
    if item.visibility not in _VISIBLE:
        return
    if any(c.item.id == item.id for c in parent):
        return  # re-export cycle

    inner = item.inner

    # Impl blocks are transparent; their items hang off the implementing type
    if isinstance(inner, Impl):
        if inner.blanket_impl is not None and not with_blanket:
            return
        for child in _resolve(crate, inner.items):
            yield from _walk(crate, child, parent, None, with_blanket)
        return

    if isinstance(inner, Import):
        target = crate.index.get(inner.id) if inner.id is not None else None
        if target is None:
            component = PathComponent(item, inner.name)
            yield IntermediatePublicItem(item, (*parent, component))
        elif inner.glob:
            if any(c.item.id == target.id for c in parent):
                return
            for child in _resolve(crate, _glob_members(target)):
                yield from _walk(crate, child, parent, None, with_blanket)
        else:
            yield from _walk(crate, target, parent, inner.name, with_blanket)
        return

    path = (*parent, PathComponent(item, name_override or item.name or ""))
    yield IntermediatePublicItem(item, path)
    for child in _resolve(crate, _children(item)):
        yield from _walk(crate, child, path, None, with_blanket)


def _children(item: Item) -> tuple[str, ...]:
    inner = item.inner
    if isinstance(inner, Module):
        return inner.items
    if isinstance(inner, (Struct, Union)):
        return inner.fields + inner.impls
    if isinstance(inner, Enum):
        return inner.variants + inner.impls
    if isinstance(inner, Variant) and isinstance(inner.kind, StructVariant):
        return inner.kind.fields
    if isinstance(inner, Trait):
        return inner.items
    return ()


def _glob_members(item: Item) -> tuple[str, ...]:
    """Ids a ``use target::*`` brings into scope; impls stay with their type."""
    inner = item.inner
    if isinstance(inner, Module):
        return inner.items
    if isinstance(inner, Enum):
        return inner.variants
    return ()


def _resolve(crate: Crate, ids: tuple[str, ...]) -> Iterator[Item]:
    for item_id in ids:
        item = crate.index.get(item_id)
        if item is not None:
            yield item
