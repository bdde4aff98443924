"""Rustdoc JSON loading.

All JSON decoding lives here. Nothing else touches the raw rustdoc format:
this module maps it onto the dataclasses in ``public_api.engine._types``
and turns any mismatch into a single :class:`RustdocJsonError`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from public_api.engine._types import (
    AngleBracketed,
    Array,
    AssocConst,
    AssocType,
    BorrowedRef,
    BoundPredicate,
    ConstArg,
    Constant,
    ConstantItem,
    ConstParam,
    ConstraintBinding,
    Crate,
    Enum,
    EqPredicate,
    EqualityBinding,
    ExternCrate,
    FnDecl,
    ForeignType,
    Function,
    FunctionPointer,
    GenericArg,
    GenericArgs,
    GenericBound,
    GenericParamDef,
    Generics,
    GenericType,
    Header,
    Impl,
    ImplTrait,
    Import,
    Infer,
    InferArg,
    Item,
    ItemKind,
    LifetimeArg,
    LifetimeParam,
    Macro,
    Method,
    Module,
    OpaqueTy,
    Outlives,
    Parenthesized,
    PlainVariant,
    Primitive,
    PrimitiveType,
    ProcMacro,
    QualifiedPath,
    RawPointer,
    RegionPredicate,
    ResolvedPath,
    Slice,
    Static,
    Struct,
    StructField,
    StructVariant,
    Term,
    Trait,
    TraitAlias,
    TraitBound,
    Tuple,
    TupleVariant,
    Type,
    TypeArg,
    TypeBinding,
    Typedef,
    TypeParam,
    Union,
    Variant,
    WherePredicate,
)

logger = logging.getLogger(__name__)


class RustdocJsonError(ValueError):
    """Raised when rustdoc JSON cannot be decoded into the item model.

    Typically the JSON comes from a nightly toolchain whose output format
    differs from the one this loader understands.
    """


def load_crate(text: str) -> Crate:
    """Parse rustdoc JSON text into a :class:`Crate`.

    Raises:
        RustdocJsonError: the text is not JSON, or does not have the
            shape of a rustdoc crate.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"invalid rustdoc JSON: {e}"
        raise RustdocJsonError(msg) from e
    except RecursionError as e:
        msg = "rustdoc JSON nested too deeply"
        raise RustdocJsonError(msg) from e

    try:
        return _crate(data)
    except RustdocJsonError:
        raise
    except RecursionError as e:
        msg = "rustdoc JSON nested too deeply"
        raise RustdocJsonError(msg) from e
    except (KeyError, TypeError, ValueError, AttributeError, IndexError) as e:
        msg = f"unexpected rustdoc JSON structure: {type(e).__name__}: {e}"
        raise RustdocJsonError(msg) from e


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _unexpected(what: str, value: Any) -> RustdocJsonError:
    return RustdocJsonError(f"unknown {what}: {value!r}")


def _single_key(obj: Any, what: str) -> tuple[str, Any]:
    """Split an externally tagged ``{"tag": payload}`` object."""
    if isinstance(obj, str):
        return obj, None
    if not isinstance(obj, dict) or len(obj) != 1:
        raise _unexpected(what, obj)
    ((tag, payload),) = obj.items()
    return tag, payload


def _ids(values: list[Any] | None) -> tuple[str, ...]:
    return tuple(str(v) for v in values or ())


def _crate(data: dict[str, Any]) -> Crate:
    index: dict[str, Item] = {}
    for key, raw in data["index"].items():
        index[str(key)] = _item(raw)
    logger.debug("Loaded %d rustdoc items", len(index))
    return Crate(
        root=str(data["root"]),
        index=MappingProxyType(index),
        crate_version=data.get("crate_version"),
        format_version=int(data.get("format_version", 0)),
    )


def _visibility(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    tag, _ = _single_key(raw, "visibility")
    return tag


def _item(raw: dict[str, Any]) -> Item:
    return Item(
        id=str(raw["id"]),
        name=raw.get("name"),
        inner=_item_kind(raw["kind"], raw.get("inner")),
        visibility=_visibility(raw.get("visibility", "public")),
        crate_id=int(raw.get("crate_id", 0)),
        attrs=tuple(raw.get("attrs") or ()),
    )


def _item_kind(kind: str, inner: Any) -> ItemKind:
    parse = _ITEM_KINDS.get(kind)
    if parse is None:
        raise _unexpected("item kind", kind)
    return parse(inner)


def _module(inner: dict[str, Any]) -> Module:
    return Module(items=_ids(inner["items"]), is_crate=bool(inner.get("is_crate", False)))


def _struct(inner: dict[str, Any]) -> Struct:
    return Struct(
        generics=_generics(inner["generics"]),
        fields=_ids(inner.get("fields")),
        impls=_ids(inner.get("impls")),
        struct_type=inner.get("struct_type", "plain"),
    )


def _union(inner: dict[str, Any]) -> Union:
    return Union(
        generics=_generics(inner["generics"]),
        fields=_ids(inner.get("fields")),
        impls=_ids(inner.get("impls")),
    )


def _enum(inner: dict[str, Any]) -> Enum:
    return Enum(
        generics=_generics(inner["generics"]),
        variants=_ids(inner.get("variants")),
        impls=_ids(inner.get("impls")),
    )


def _variant(inner: dict[str, Any]) -> Variant:
    kind = inner["variant_kind"]
    payload = inner.get("variant_inner")
    if kind == "plain":
        return Variant(PlainVariant())
    if kind == "tuple":
        return Variant(TupleVariant(tuple(_type(t) for t in payload)))
    if kind == "struct":
        return Variant(StructVariant(_ids(payload)))
    raise _unexpected("variant kind", kind)


def _function(inner: dict[str, Any]) -> Function:
    return Function(
        decl=_fn_decl(inner["decl"]),
        generics=_generics(inner["generics"]),
        header=_header(inner["header"]),
    )


def _method(inner: dict[str, Any]) -> Method:
    return Method(
        decl=_fn_decl(inner["decl"]),
        generics=_generics(inner["generics"]),
        header=_header(inner["header"]),
        has_body=bool(inner.get("has_body", True)),
    )


def _trait(inner: dict[str, Any]) -> Trait:
    return Trait(
        items=_ids(inner.get("items")),
        generics=_generics(inner["generics"]),
        bounds=_bounds(inner.get("bounds")),
        is_auto=bool(inner.get("is_auto", False)),
        is_unsafe=bool(inner.get("is_unsafe", False)),
    )


def _impl(inner: dict[str, Any]) -> Impl:
    trait = inner.get("trait")
    blanket = inner.get("blanket_impl")
    return Impl(
        for_=_type(inner["for"]),
        items=_ids(inner.get("items")),
        generics=_generics(inner["generics"]),
        trait_=_type(trait) if trait is not None else None,
        is_unsafe=bool(inner.get("is_unsafe", False)),
        negative=bool(inner.get("negative", False)),
        synthetic=bool(inner.get("synthetic", False)),
        blanket_impl=_type(blanket) if blanket is not None else None,
    )


def _assoc_type(inner: dict[str, Any]) -> AssocType:
    default = inner.get("default")
    return AssocType(
        generics=_generics(inner["generics"]),
        bounds=_bounds(inner.get("bounds")),
        default=_type(default) if default is not None else None,
    )


def _import(inner: dict[str, Any]) -> Import:
    target = inner.get("id")
    return Import(
        source=inner["source"],
        name=inner["name"],
        id=str(target) if target is not None else None,
        glob=bool(inner.get("glob", False)),
    )


_ITEM_KINDS: dict[str, Callable[[Any], ItemKind]] = {
    "module": _module,
    "extern_crate": lambda i: ExternCrate(name=i["name"], rename=i.get("rename")),
    "import": _import,
    "union": _union,
    "struct": _struct,
    "struct_field": lambda i: StructField(_type(i)),
    "enum": _enum,
    "variant": _variant,
    "function": _function,
    "method": _method,
    "trait": _trait,
    "trait_alias": lambda i: TraitAlias(
        generics=_generics(i["generics"]), params=_bounds(i.get("params"))
    ),
    "impl": _impl,
    "typedef": lambda i: Typedef(type_=_type(i["type"]), generics=_generics(i["generics"])),
    "assoc_type": _assoc_type,
    "opaque_ty": lambda i: OpaqueTy(bounds=_bounds(i.get("bounds")), generics=_generics(i["generics"])),
    "constant": lambda i: ConstantItem(_constant(i)),
    "assoc_const": lambda i: AssocConst(type_=_type(i["type"]), default=i.get("default")),
    "static": lambda i: Static(
        type_=_type(i["type"]), mutable=bool(i.get("mutable", False)), expr=i.get("expr", "")
    ),
    "foreign_type": lambda _: ForeignType(),
    "macro": lambda i: Macro(definition=i or ""),
    "proc_macro": lambda i: ProcMacro(kind=i["kind"], helpers=tuple(i.get("helpers") or ())),
    "primitive_type": lambda i: PrimitiveType(name=i),
}


# ---- Types ----


def _type(raw: dict[str, Any]) -> Type:
    kind = raw["kind"]
    inner = raw.get("inner")
    if kind == "resolved_path":
        args = inner.get("args")
        return ResolvedPath(
            name=inner["name"],
            id=str(inner["id"]),
            args=_generic_args(args) if args is not None else None,
            param_names=_bounds(inner.get("param_names")),
        )
    if kind == "generic":
        return GenericType(inner)
    if kind == "primitive":
        return Primitive(inner)
    if kind == "function_pointer":
        return FunctionPointer(
            decl=_fn_decl(inner["decl"]),
            generic_params=_param_defs(inner.get("generic_params")),
            header=_header(inner["header"]),
        )
    if kind == "tuple":
        return Tuple(tuple(_type(t) for t in inner))
    if kind == "slice":
        return Slice(_type(inner))
    if kind == "array":
        return Array(type_=_type(inner["type"]), len=str(inner["len"]))
    if kind == "impl_trait":
        return ImplTrait(_bounds(inner))
    if kind == "infer":
        return Infer()
    if kind == "raw_pointer":
        return RawPointer(mutable=bool(inner["mutable"]), type_=_type(inner["type"]))
    if kind == "borrowed_ref":
        return BorrowedRef(
            lifetime=inner.get("lifetime"),
            mutable=bool(inner["mutable"]),
            type_=_type(inner["type"]),
        )
    if kind == "qualified_path":
        args = inner.get("args")
        return QualifiedPath(
            name=inner["name"],
            self_type=_type(inner["self_type"]),
            trait_=_type(inner["trait"]),
            args=_generic_args(args) if args is not None else None,
        )
    raise _unexpected("type kind", kind)


def _generic_args(raw: Any) -> GenericArgs:
    tag, payload = _single_key(raw, "generic args")
    if tag == "angle_bracketed":
        return AngleBracketed(
            args=tuple(_generic_arg(a) for a in payload.get("args") or ()),
            bindings=tuple(_type_binding(b) for b in payload.get("bindings") or ()),
        )
    if tag == "parenthesized":
        output = payload.get("output")
        return Parenthesized(
            inputs=tuple(_type(t) for t in payload.get("inputs") or ()),
            output=_type(output) if output is not None else None,
        )
    raise _unexpected("generic args", tag)


def _generic_arg(raw: Any) -> GenericArg:
    tag, payload = _single_key(raw, "generic arg")
    if tag == "lifetime":
        return LifetimeArg(payload)
    if tag == "type":
        return TypeArg(_type(payload))
    if tag == "const":
        return ConstArg(_constant(payload))
    if tag == "infer":
        return InferArg()
    raise _unexpected("generic arg", tag)


def _type_binding(raw: dict[str, Any]) -> TypeBinding:
    tag, payload = _single_key(raw["binding"], "type binding")
    binding: EqualityBinding | ConstraintBinding
    if tag == "equality":
        binding = EqualityBinding(_term(payload))
    elif tag == "constraint":
        binding = ConstraintBinding(_bounds(payload))
    else:
        raise _unexpected("type binding", tag)
    return TypeBinding(name=raw["name"], args=_generic_args(raw["args"]), binding=binding)


def _term(raw: Any) -> Term:
    tag, payload = _single_key(raw, "term")
    if tag == "type":
        return _type(payload)
    if tag == "constant":
        return _constant(payload)
    raise _unexpected("term", tag)


def _constant(raw: dict[str, Any]) -> Constant:
    return Constant(
        type_=_type(raw["type"]),
        expr=raw.get("expr", ""),
        value=raw.get("value"),
        is_literal=bool(raw.get("is_literal", False)),
    )


def _bounds(values: list[Any] | None) -> tuple[GenericBound, ...]:
    return tuple(_bound(b) for b in values or ())


def _bound(raw: Any) -> GenericBound:
    tag, payload = _single_key(raw, "generic bound")
    if tag == "trait_bound":
        return TraitBound(
            trait_=_type(payload["trait"]),
            generic_params=_param_defs(payload.get("generic_params")),
            modifier=payload.get("modifier", "none"),
        )
    if tag == "outlives":
        return Outlives(payload)
    raise _unexpected("generic bound", tag)


def _generics(raw: dict[str, Any]) -> Generics:
    return Generics(
        params=_param_defs(raw.get("params")),
        where_predicates=tuple(_where_predicate(p) for p in raw.get("where_predicates") or ()),
    )


def _param_defs(values: list[Any] | None) -> tuple[GenericParamDef, ...]:
    return tuple(_param_def(p) for p in values or ())


def _param_def(raw: dict[str, Any]) -> GenericParamDef:
    tag, payload = _single_key(raw["kind"], "generic param kind")
    if tag == "lifetime":
        return GenericParamDef(raw["name"], LifetimeParam(tuple(payload.get("outlives") or ())))
    if tag == "type":
        default = payload.get("default")
        return GenericParamDef(
            raw["name"],
            TypeParam(
                bounds=_bounds(payload.get("bounds")),
                default=_type(default) if default is not None else None,
                synthetic=bool(payload.get("synthetic", False)),
            ),
        )
    if tag == "const":
        return GenericParamDef(
            raw["name"], ConstParam(type_=_type(payload["type"]), default=payload.get("default"))
        )
    raise _unexpected("generic param kind", tag)


def _where_predicate(raw: Any) -> WherePredicate:
    tag, payload = _single_key(raw, "where predicate")
    if tag == "bound_predicate":
        return BoundPredicate(
            type_=_type(payload["type"]),
            bounds=_bounds(payload.get("bounds")),
            generic_params=_param_defs(payload.get("generic_params")),
        )
    if tag == "region_predicate":
        return RegionPredicate(lifetime=payload["lifetime"], bounds=_bounds(payload.get("bounds")))
    if tag == "eq_predicate":
        return EqPredicate(lhs=_type(payload["lhs"]), rhs=_term(payload["rhs"]))
    raise _unexpected("where predicate", tag)


# ---- Functions ----


def _fn_decl(raw: dict[str, Any]) -> FnDecl:
    output = raw.get("output")
    return FnDecl(
        inputs=tuple((str(name), _type(ty)) for name, ty in raw.get("inputs") or ()),
        output=_type(output) if output is not None else None,
        c_variadic=bool(raw.get("c_variadic", False)),
    )


def _header(raw: dict[str, Any]) -> Header:
    abi_tag, _ = _single_key(raw.get("abi", "Rust"), "abi")
    abi = abi_tag
    if abi_tag == "Other":
        _, abi = _single_key(raw["abi"], "abi")
    return Header(
        const=bool(raw.get("const", False)),
        unsafe=bool(raw.get("unsafe", False)),
        async_=bool(raw.get("async", False)),
        abi=str(abi),
    )
