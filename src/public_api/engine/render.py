"""Render items and types into canonical token sequences.

Every function takes the crate as an explicit, read-only context. Nothing
here can fail on well-formed input: identifiers that cannot be resolved
through the index contribute no tokens.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

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
    Id,
    Impl,
    ImplTrait,
    Import,
    Infer,
    InferArg,
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
from public_api.engine.tokens import WS, Token

if TYPE_CHECKING:
    from public_api.engine.items import IntermediatePublicItem, PathComponent

T = TypeVar("T")

_ABI_QUALIFIERS: dict[str, str] = {
    "C": "c",
    "Cdecl": "cdecl",
    "Stdcall": "stdcall",
    "Fastcall": "fastcall",
    "Aapcs": "aapcs",
    "Win64": "win64",
    "SysV64": "sysV64",
    "System": "system",
}


def token_stream(crate: Crate, item: IntermediatePublicItem) -> list[Token]:
    """Render the ``pub`` declaration line of *item*."""
    inner = item.item.inner
    path = item.path

    if isinstance(inner, Module):
        return _render_simple(["mod"], path)
    if isinstance(inner, ExternCrate):
        return _render_simple(["extern", "crate"], path)
    if isinstance(inner, Import):
        return _render_simple(["use"], path)
    if isinstance(inner, Union):
        return _render_simple(["union"], path)
    if isinstance(inner, Struct):
        return _render_simple(["struct"], path) + render_generics(crate, inner.generics)
    if isinstance(inner, StructField):
        return _render_simple(["struct", "field"], path) + _colon() + render_type(crate, inner.type_)
    if isinstance(inner, Enum):
        return _render_simple(["enum"], path) + render_generics(crate, inner.generics)
    if isinstance(inner, Variant):
        output = _render_simple(["enum", "variant"], path)
        if isinstance(inner.kind, TupleVariant):
            output.extend(_render_tuple(crate, inner.kind.types))
        elif not isinstance(inner.kind, (PlainVariant, StructVariant)):
            raise TypeError(f"unhandled variant kind: {inner.kind!r}")
        # struct variant fields are emitted as items of their own
        return output
    if isinstance(inner, (Function, Method)):
        return render_function(crate, render_path(path), inner.decl, inner.generics, inner.header)
    if isinstance(inner, Trait):
        tags = ["unsafe", "trait"] if inner.is_unsafe else ["trait"]
        return _render_simple(tags, path) + render_generics(crate, inner.generics)
    if isinstance(inner, TraitAlias):
        return _render_simple(["trait", "alias"], path)
    if isinstance(inner, Impl):
        return _render_simple(["impl"], path)
    if isinstance(inner, Typedef):
        output = _render_simple(["type"], path)
        output.extend(render_generics(crate, inner.generics))
        output.extend(_equals())
        output.extend(render_type(crate, inner.type_))
        return output
    if isinstance(inner, AssocType):
        output = _render_simple(["type"], path)
        output.extend(render_generics(crate, inner.generics))
        output.extend(render_generic_bounds(crate, inner.bounds))
        if inner.default is not None:
            output.extend(_equals())
            output.extend(render_type(crate, inner.default))
        return output
    if isinstance(inner, OpaqueTy):
        return _render_simple(["opaque", "type"], path)
    if isinstance(inner, ConstantItem):
        return _render_simple(["const"], path) + _colon() + render_constant(crate, inner.constant)
    if isinstance(inner, AssocConst):
        return _render_simple(["const"], path) + _colon() + render_type(crate, inner.type_)
    if isinstance(inner, Static):
        tags = ["mut", "static"] if inner.mutable else ["static"]
        return _render_simple(tags, path) + _colon() + render_type(crate, inner.type_)
    if isinstance(inner, ForeignType):
        return _render_simple(["type"], path)
    if isinstance(inner, Macro):
        return _render_simple(["macro"], path) + [Token.symbol("!")]
    if isinstance(inner, ProcMacro):
        return _render_proc_macro(inner, item.item.name or "", path)
    if isinstance(inner, PrimitiveType):
        return _render_simple(["primitive", "type"], path)
    raise TypeError(f"unhandled item kind: {inner!r}")


def _render_simple(tags: Sequence[str], path: Sequence[PathComponent]) -> list[Token]:
    output = [Token.qualifier("pub"), WS]
    for tag in tags:
        output.extend([Token.kind_(tag), WS])
    output.extend(render_path(path))
    return output


def _render_proc_macro(inner: ProcMacro, name: str, path: Sequence[PathComponent]) -> list[Token]:
    output = _render_simple(["proc", "macro"], path)
    if path:
        output.pop()  # the name goes inside the invocation syntax instead
    ident = Token.identifier(name)
    if inner.kind == "bang":
        output.extend([ident, Token.symbol("!()")])
    elif inner.kind == "attr":
        output.extend([Token.symbol("#["), ident, Token.symbol("]")])
    else:
        output.extend([Token.symbol("#[derive("), ident, Token.symbol(")]")])
    return output


def render_path(path: Sequence[PathComponent]) -> list[Token]:
    """Join path segments with ``::``, tagging each by what it names."""
    output: list[Token] = []
    for component in path:
        inner = component.item.inner
        if isinstance(inner, (Function, Method)):
            output.append(Token.function(component.name))
        elif isinstance(inner, (Trait, Struct, Union, Enum, Typedef)):
            output.append(Token.type_(component.name))
        else:
            output.append(Token.identifier(component.name))
        output.append(Token.symbol("::"))
    if output:
        output.pop()
    return output


def render_id(crate: Crate, id: Id) -> list[Token]:
    """Name of the item behind *id*, or nothing if it is absent or unnamed."""
    item = crate.index.get(id)
    if item is None or item.name is None:
        return []
    return [Token.identifier(item.name)]


def render_sequence(
    start: list[Token],
    end: list[Token],
    between: list[Token],
    return_nothing_if_empty: bool,
    sequence: Sequence[T],
    render: Callable[[T], list[Token]],
) -> list[Token]:
    """Render *sequence* as ``start e1 between e2 ... end``.

    With *return_nothing_if_empty*, a sequence that renders no tokens at all
    yields an empty list instead of a bare ``start end`` pair.
    """
    output = list(start)
    for index, element in enumerate(sequence):
        if index:
            output.extend(between)
        output.extend(render(element))
    if return_nothing_if_empty and len(output) == len(start):
        return []
    output.extend(end)
    return output


def render_type(crate: Crate, ty: Type) -> list[Token]:
    """Render a type expression."""
    if isinstance(ty, ResolvedPath):
        return _render_resolved_path(crate, ty)
    if isinstance(ty, GenericType):
        return [Token.generic(ty.name)]
    if isinstance(ty, Primitive):
        return [Token.primitive(ty.name)]
    if isinstance(ty, FunctionPointer):
        output = render_higher_rank_trait_bounds(crate, ty.generic_params)
        output.append(Token.kind_("fn"))
        output.extend(render_fn_decl(crate, ty.decl))
        return output
    if isinstance(ty, Tuple):
        return _render_tuple(crate, ty.types)
    if isinstance(ty, Slice):
        return [Token.symbol("["), *render_type(crate, ty.type_), Token.symbol("]")]
    if isinstance(ty, Array):
        return [
            Token.symbol("["),
            *render_type(crate, ty.type_),
            Token.symbol(";"),
            WS,
            Token.primitive(ty.len),
            Token.symbol("]"),
        ]
    if isinstance(ty, ImplTrait):
        return [Token.keyword("impl"), WS, *render_generic_bounds(crate, ty.bounds)]
    if isinstance(ty, Infer):
        return [Token.symbol("_")]
    if isinstance(ty, RawPointer):
        return [
            Token.symbol("*"),
            Token.keyword("mut" if ty.mutable else "const"),
            WS,
            *render_type(crate, ty.type_),
        ]
    if isinstance(ty, BorrowedRef):
        return [Token.symbol("&"), *_lifetime_and_mut(ty), *render_type(crate, ty.type_)]
    if isinstance(ty, QualifiedPath):
        return [
            Token.symbol("<"),
            *render_type(crate, ty.self_type),
            WS,
            Token.keyword("as"),
            WS,
            *render_type(crate, ty.trait_),
            Token.symbol(">::"),
            Token.identifier(ty.name),
        ]
    raise TypeError(f"unhandled type: {ty!r}")


def _render_resolved_path(crate: Crate, ty: ResolvedPath) -> list[Token]:
    output: list[Token] = []
    if not ty.name:
        output.extend(render_id(crate, ty.id))
    else:
        parts = ty.name.split("::")
        last = len(parts) - 1
        for index, part in enumerate(parts):
            if index == 0 and part == "$crate":
                output.append(Token.identifier(part))
            elif index == last:
                output.append(Token.type_(part))
            else:
                output.append(Token.identifier(part))
            output.append(Token.symbol("::"))
        output.pop()
        if ty.args is not None:
            output.extend(render_generic_args(crate, ty.args))
    if ty.param_names:
        output.extend(_plus())
        output.extend(render_generic_bounds(crate, ty.param_names))
    return output


def _lifetime_and_mut(ty: BorrowedRef) -> list[Token]:
    output: list[Token] = []
    if ty.lifetime is not None:
        output.extend([Token.lifetime(ty.lifetime), WS])
    if ty.mutable:
        output.extend([Token.keyword("mut"), WS])
    return output


def render_function(
    crate: Crate,
    name: list[Token],
    decl: FnDecl,
    generics: Generics,
    header: Header,
) -> list[Token]:
    """Render a free function or method with its qualifiers, generics and where clause."""
    output = [Token.qualifier("pub"), WS]
    output.extend(_render_header(header))
    output.extend([Token.kind_("fn"), WS])
    output.extend(name)
    output.extend(render_generic_param_defs(crate, generics.params))
    output.extend(render_fn_decl(crate, decl))
    output.extend(render_where_predicates(crate, generics.where_predicates))
    return output


def _render_header(header: Header) -> list[Token]:
    # fixed order: unsafe, const, async, abi
    output: list[Token] = []
    if header.unsafe:
        output.extend([Token.qualifier("unsafe"), WS])
    if header.const:
        output.extend([Token.qualifier("const"), WS])
    if header.async_:
        output.extend([Token.qualifier("async"), WS])
    if header.abi != "Rust":
        output.extend([Token.qualifier(_ABI_QUALIFIERS.get(header.abi, header.abi)), WS])
    return output


def render_fn_decl(crate: Crate, decl: FnDecl) -> list[Token]:
    """Argument list and return type."""

    def render_input(arg: tuple[str, Type]) -> list[Token]:
        name, ty = arg
        simplified = simplified_self(name, ty)
        if simplified is not None:
            return simplified
        output: list[Token] = []
        if name != "_":
            output.extend([Token.identifier(name), Token.symbol(":"), WS])
        output.extend(render_type(crate, ty))
        return output

    output = render_sequence(
        [Token.symbol("(")], [Token.symbol(")")], _comma(), False, decl.inputs, render_input
    )
    if decl.output is not None:
        output.extend(_arrow())
        output.extend(render_type(crate, decl.output))
    return output


def simplified_self(name: str, ty: Type) -> list[Token] | None:
    """``self: Self`` -> ``self``, ``self: &'a mut Self`` -> ``&'a mut self``.

    Returns None for anything else, so the parameter renders verbatim.
    """
    if name != "self":
        return None
    if isinstance(ty, GenericType) and ty.name == "Self":
        return [Token.self_("self")]
    if isinstance(ty, BorrowedRef) and isinstance(ty.type_, GenericType) and ty.type_.name == "Self":
        return [Token.symbol("&"), *_lifetime_and_mut(ty), Token.self_("self")]
    return None


def _render_tuple(crate: Crate, types: Sequence[Type]) -> list[Token]:
    return render_sequence(
        [Token.symbol("(")],
        [Token.symbol(")")],
        _comma(),
        False,
        types,
        lambda ty: render_type(crate, ty),
    )


def render_generic_args(crate: Crate, args: GenericArgs) -> list[Token]:
    """``<A, B, Item = C>`` or ``(A, B) -> C``; empty angle brackets render nothing."""
    if isinstance(args, AngleBracketed):
        elements: list[GenericArg | TypeBinding] = [*args.args, *args.bindings]
        return render_sequence(
            [Token.symbol("<")],
            [Token.symbol(">")],
            _comma(),
            True,
            elements,
            lambda arg: (
                _render_type_binding(crate, arg)
                if isinstance(arg, TypeBinding)
                else render_generic_arg(crate, arg)
            ),
        )
    if isinstance(args, Parenthesized):
        output = _render_tuple(crate, args.inputs)
        if args.output is not None:
            output.extend(_arrow())
            output.extend(render_type(crate, args.output))
        return output
    raise TypeError(f"unhandled generic args: {args!r}")


def _render_type_binding(crate: Crate, binding: TypeBinding) -> list[Token]:
    output = [Token.identifier(binding.name)]
    output.extend(render_generic_args(crate, binding.args))
    if isinstance(binding.binding, EqualityBinding):
        output.extend(_equals())
        output.extend(render_term(crate, binding.binding.term))
    elif isinstance(binding.binding, ConstraintBinding):
        output.extend(render_generic_bounds(crate, binding.binding.bounds))
    else:
        raise TypeError(f"unhandled type binding: {binding.binding!r}")
    return output


def render_term(crate: Crate, term: Term) -> list[Token]:
    if isinstance(term, Constant):
        return render_constant(crate, term)
    return render_type(crate, term)


def render_generic_arg(crate: Crate, arg: GenericArg) -> list[Token]:
    if isinstance(arg, LifetimeArg):
        return [Token.lifetime(arg.name)]
    if isinstance(arg, TypeArg):
        return render_type(crate, arg.type_)
    if isinstance(arg, ConstArg):
        return render_constant(crate, arg.constant)
    if isinstance(arg, InferArg):
        return [Token.symbol("_")]
    raise TypeError(f"unhandled generic arg: {arg!r}")


def render_constant(crate: Crate, constant: Constant) -> list[Token]:
    output = render_type(crate, constant.type_)
    if constant.value is not None:
        output.extend(_equals())
        if constant.is_literal:
            output.append(Token.primitive(constant.value))
        else:
            output.append(Token.identifier(constant.value))
    return output


def render_generics(crate: Crate, generics: Generics) -> list[Token]:
    return render_generic_param_defs(crate, generics.params) + render_where_predicates(
        crate, generics.where_predicates
    )


def render_generic_param_defs(crate: Crate, params: Sequence[GenericParamDef]) -> list[Token]:
    """``<'a, T: Bound, const N: usize>``, skipping compiler-injected parameters."""
    visible = [
        p for p in params if not (isinstance(p.kind, TypeParam) and p.kind.synthetic)
    ]
    if not visible:
        return []
    return render_sequence(
        [Token.symbol("<")],
        [Token.symbol(">")],
        _comma(),
        True,
        visible,
        lambda param: render_generic_param_def(crate, param),
    )


def render_generic_param_def(crate: Crate, param: GenericParamDef) -> list[Token]:
    kind = param.kind
    if isinstance(kind, LifetimeParam):
        output = [Token.lifetime(param.name)]
        if kind.outlives:
            output.extend(_colon())
            output.extend(
                render_sequence([], [], _plus(), True, kind.outlives, lambda lt: [Token.lifetime(lt)])
            )
        return output
    if isinstance(kind, TypeParam):
        output = [Token.generic(param.name)]
        if kind.bounds:
            output.extend(_colon())
            output.extend(render_generic_bounds(crate, kind.bounds))
        return output
    if isinstance(kind, ConstParam):
        return [
            Token.qualifier("const"),
            WS,
            Token.identifier(param.name),
            *_colon(),
            *render_type(crate, kind.type_),
        ]
    raise TypeError(f"unhandled generic param kind: {kind!r}")


def render_where_predicates(crate: Crate, predicates: Sequence[WherePredicate]) -> list[Token]:
    """`` where p1, p2``; nothing when there are no predicates."""
    if not predicates:
        return []
    output = [WS, Token.keyword("where"), WS]
    output.extend(
        render_sequence(
            [], [], _comma(), True, predicates, lambda p: render_where_predicate(crate, p)
        )
    )
    return output


def render_where_predicate(crate: Crate, predicate: WherePredicate) -> list[Token]:
    if isinstance(predicate, BoundPredicate):
        output = render_higher_rank_trait_bounds(crate, predicate.generic_params)
        output.extend(render_type(crate, predicate.type_))
        output.extend(_colon())
        output.extend(render_generic_bounds(crate, predicate.bounds))
        return output
    if isinstance(predicate, RegionPredicate):
        # outlived lifetimes are not rendered
        return [Token.lifetime(predicate.lifetime)]
    if isinstance(predicate, EqPredicate):
        return [*render_type(crate, predicate.lhs), *_equals(), *render_term(crate, predicate.rhs)]
    raise TypeError(f"unhandled where predicate: {predicate!r}")


def render_generic_bounds(crate: Crate, bounds: Sequence[GenericBound]) -> list[Token]:
    """``A + B + 'a``."""
    if not bounds:
        return []
    return render_sequence([], [], _plus(), True, bounds, lambda b: render_generic_bound(crate, b))


def render_generic_bound(crate: Crate, bound: GenericBound) -> list[Token]:
    if isinstance(bound, TraitBound):
        output = render_higher_rank_trait_bounds(crate, bound.generic_params)
        output.extend(render_type(crate, bound.trait_))
        return output
    if isinstance(bound, Outlives):
        return [Token.lifetime(bound.lifetime)]
    raise TypeError(f"unhandled generic bound: {bound!r}")


def render_higher_rank_trait_bounds(crate: Crate, params: Sequence[GenericParamDef]) -> list[Token]:
    """``for<'a> `` before a bounded type; nothing for an empty list."""
    if not params:
        return []
    return [Token.keyword("for"), *render_generic_param_defs(crate, params), WS]


def _plus() -> list[Token]:
    return [WS, Token.symbol("+"), WS]


def _colon() -> list[Token]:
    return [Token.symbol(":"), WS]


def _comma() -> list[Token]:
    return [Token.symbol(","), WS]


def _equals() -> list[Token]:
    return [WS, Token.symbol("="), WS]


def _arrow() -> list[Token]:
    return [WS, Token.symbol("->"), WS]
