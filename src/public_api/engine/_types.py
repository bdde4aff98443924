"""Shared AST types for the public-api engine.

These mirror the shapes rustdoc emits in its JSON output. Each concept
with several forms (item kind, type, generic argument, bound, where
predicate, ...) is a closed union of frozen dataclasses; the renderer
dispatches on the concrete class.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

Id = str

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedPath:
    """A named path such as ``std::vec::Vec<T>``; ``name`` may be empty."""

    name: str
    id: Id
    args: GenericArgs | None = None
    param_names: tuple[GenericBound, ...] = ()  # trailing "+ Bound" on dyn paths


@dataclass(frozen=True)
class GenericType:
    """Reference to a generic parameter, including ``Self``."""

    name: str


@dataclass(frozen=True)
class Primitive:
    name: str


@dataclass(frozen=True)
class FunctionPointer:
    decl: FnDecl
    generic_params: tuple[GenericParamDef, ...] = ()
    header: Header = field(default_factory=lambda: Header())


@dataclass(frozen=True)
class Tuple:
    types: tuple[Type, ...] = ()


@dataclass(frozen=True)
class Slice:
    type_: Type


@dataclass(frozen=True)
class Array:
    type_: Type
    len: str


@dataclass(frozen=True)
class ImplTrait:
    bounds: tuple[GenericBound, ...] = ()


@dataclass(frozen=True)
class Infer:
    """The ``_`` placeholder."""


@dataclass(frozen=True)
class RawPointer:
    mutable: bool
    type_: Type


@dataclass(frozen=True)
class BorrowedRef:
    lifetime: str | None
    mutable: bool
    type_: Type


@dataclass(frozen=True)
class QualifiedPath:
    """``<self_type as trait_>::name``."""

    name: str
    self_type: Type
    trait_: Type
    args: GenericArgs | None = None


# ---------------------------------------------------------------------------
# Generic arguments, bounds and parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AngleBracketed:
    args: tuple[GenericArg, ...] = ()
    bindings: tuple[TypeBinding, ...] = ()


@dataclass(frozen=True)
class Parenthesized:
    """``Fn(A, B) -> C`` style arguments."""

    inputs: tuple[Type, ...] = ()
    output: Type | None = None


@dataclass(frozen=True)
class LifetimeArg:
    name: str


@dataclass(frozen=True)
class TypeArg:
    type_: Type


@dataclass(frozen=True)
class ConstArg:
    constant: Constant


@dataclass(frozen=True)
class InferArg:
    pass


@dataclass(frozen=True)
class Constant:
    type_: Type
    expr: str = ""
    value: str | None = None
    is_literal: bool = False


@dataclass(frozen=True)
class EqualityBinding:
    term: Term


@dataclass(frozen=True)
class ConstraintBinding:
    bounds: tuple[GenericBound, ...] = ()


@dataclass(frozen=True)
class TypeBinding:
    """Associated item binding inside generic args, e.g. ``Item = u8``."""

    name: str
    args: GenericArgs
    binding: EqualityBinding | ConstraintBinding


@dataclass(frozen=True)
class TraitBound:
    trait_: Type
    generic_params: tuple[GenericParamDef, ...] = ()
    modifier: str = "none"  # "none", "maybe" or "maybe_const"; not rendered


@dataclass(frozen=True)
class Outlives:
    lifetime: str


@dataclass(frozen=True)
class LifetimeParam:
    outlives: tuple[str, ...] = ()


@dataclass(frozen=True)
class TypeParam:
    bounds: tuple[GenericBound, ...] = ()
    default: Type | None = None
    synthetic: bool = False  # injected for `impl Trait` arguments


@dataclass(frozen=True)
class ConstParam:
    type_: Type
    default: str | None = None


@dataclass(frozen=True)
class GenericParamDef:
    name: str
    kind: GenericParamDefKind


@dataclass(frozen=True)
class BoundPredicate:
    type_: Type
    bounds: tuple[GenericBound, ...] = ()
    generic_params: tuple[GenericParamDef, ...] = ()


@dataclass(frozen=True)
class RegionPredicate:
    lifetime: str
    bounds: tuple[GenericBound, ...] = ()


@dataclass(frozen=True)
class EqPredicate:
    lhs: Type
    rhs: Term


@dataclass(frozen=True)
class Generics:
    params: tuple[GenericParamDef, ...] = ()
    where_predicates: tuple[WherePredicate, ...] = ()


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Header:
    const: bool = False
    unsafe: bool = False
    async_: bool = False
    abi: str = "Rust"  # "Rust" is the implicit default calling convention


@dataclass(frozen=True)
class FnDecl:
    inputs: tuple[tuple[str, Type], ...] = ()
    output: Type | None = None
    c_variadic: bool = False


# ---------------------------------------------------------------------------
# Item kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Module:
    items: tuple[Id, ...] = ()
    is_crate: bool = False


@dataclass(frozen=True)
class ExternCrate:
    name: str
    rename: str | None = None


@dataclass(frozen=True)
class Import:
    """A ``use`` declaration. ``id`` is None when the target is not documented."""

    source: str
    name: str
    id: Id | None = None
    glob: bool = False


@dataclass(frozen=True)
class Union:
    generics: Generics = Generics()
    fields: tuple[Id, ...] = ()
    impls: tuple[Id, ...] = ()


@dataclass(frozen=True)
class Struct:
    generics: Generics = Generics()
    fields: tuple[Id, ...] = ()
    impls: tuple[Id, ...] = ()
    struct_type: str = "plain"


@dataclass(frozen=True)
class StructField:
    type_: Type


@dataclass(frozen=True)
class Enum:
    generics: Generics = Generics()
    variants: tuple[Id, ...] = ()
    impls: tuple[Id, ...] = ()


@dataclass(frozen=True)
class PlainVariant:
    pass


@dataclass(frozen=True)
class TupleVariant:
    types: tuple[Type, ...] = ()


@dataclass(frozen=True)
class StructVariant:
    fields: tuple[Id, ...] = ()


@dataclass(frozen=True)
class Variant:
    kind: PlainVariant | TupleVariant | StructVariant


@dataclass(frozen=True)
class Function:
    decl: FnDecl = FnDecl()
    generics: Generics = Generics()
    header: Header = Header()


@dataclass(frozen=True)
class Method:
    decl: FnDecl = FnDecl()
    generics: Generics = Generics()
    header: Header = Header()
    has_body: bool = True


@dataclass(frozen=True)
class Trait:
    items: tuple[Id, ...] = ()
    generics: Generics = Generics()
    bounds: tuple[GenericBound, ...] = ()
    is_auto: bool = False
    is_unsafe: bool = False


@dataclass(frozen=True)
class TraitAlias:
    generics: Generics = Generics()
    params: tuple[GenericBound, ...] = ()


@dataclass(frozen=True)
class Impl:
    for_: Type
    items: tuple[Id, ...] = ()
    generics: Generics = Generics()
    trait_: Type | None = None
    is_unsafe: bool = False
    negative: bool = False
    synthetic: bool = False
    blanket_impl: Type | None = None


@dataclass(frozen=True)
class Typedef:
    type_: Type
    generics: Generics = Generics()


@dataclass(frozen=True)
class AssocType:
    generics: Generics = Generics()
    bounds: tuple[GenericBound, ...] = ()
    default: Type | None = None


@dataclass(frozen=True)
class OpaqueTy:
    bounds: tuple[GenericBound, ...] = ()
    generics: Generics = Generics()


@dataclass(frozen=True)
class ConstantItem:
    constant: Constant


@dataclass(frozen=True)
class AssocConst:
    type_: Type
    default: str | None = None


@dataclass(frozen=True)
class Static:
    type_: Type
    mutable: bool = False
    expr: str = ""


@dataclass(frozen=True)
class ForeignType:
    pass


@dataclass(frozen=True)
class Macro:
    definition: str = ""


@dataclass(frozen=True)
class ProcMacro:
    kind: Literal["bang", "attr", "derive"]
    helpers: tuple[str, ...] = ()


@dataclass(frozen=True)
class PrimitiveType:
    name: str


# ---------------------------------------------------------------------------
# Items and the crate index
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Item:
    """One documented item. ``visibility`` is "public", "default", "crate" or "restricted"."""

    id: Id
    name: str | None
    inner: ItemKind
    visibility: str = "public"
    crate_id: int = 0
    attrs: tuple[str, ...] = ()


@dataclass(frozen=True)
class Crate:
    """The whole documented crate. ``index`` is shared read-only by all renders."""

    root: Id
    index: Mapping[Id, Item]
    crate_version: str | None = None
    format_version: int = 0


Type = (
    ResolvedPath
    | GenericType
    | Primitive
    | FunctionPointer
    | Tuple
    | Slice
    | Array
    | ImplTrait
    | Infer
    | RawPointer
    | BorrowedRef
    | QualifiedPath
)
GenericArgs = AngleBracketed | Parenthesized
GenericArg = LifetimeArg | TypeArg | ConstArg | InferArg
GenericBound = TraitBound | Outlives
GenericParamDefKind = LifetimeParam | TypeParam | ConstParam
WherePredicate = BoundPredicate | RegionPredicate | EqPredicate
Term = Type | Constant
ItemKind = (
    Module
    | ExternCrate
    | Import
    | Union
    | Struct
    | StructField
    | Enum
    | Variant
    | Function
    | Method
    | Trait
    | TraitAlias
    | Impl
    | Typedef
    | AssocType
    | OpaqueTy
    | ConstantItem
    | AssocConst
    | Static
    | ForeignType
    | Macro
    | ProcMacro
    | PrimitiveType
)
