"""Shape extraction: reflect Python type hints into shape requests."""

from __future__ import annotations

import dataclasses
import enum
import types
from collections.abc import Callable, Mapping, Sequence, Set as AbstractSet
from typing import (
    Annotated,
    Any,
    Literal,
    TypeAliasType,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from kaydle.errors import SchemaError
from kaydle.logging import get_logger
from kaydle.magics import FieldRole, identifier_of
from kaydle.records import IgnoredAny, Record
from kaydle.shapes import (
    AnyShape,
    EnumShape,
    FieldShape,
    IgnoredShape,
    MapShape,
    NewtypeShape,
    OptionShape,
    PrimitiveShape,
    RefShape,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    TupleStructShape,
    UnitShape,
    UnitStructShape,
    Variant,
)

logger = get_logger(__name__)

_PRIMITIVES: frozenset[type] = frozenset({bool, int, float, str})

# Mapping from container origins to the concrete type a sequence is collected into
_SEQUENCE_CONTAINERS: dict[Any, type] = {
    list: list,
    set: set,
    frozenset: frozenset,
    Sequence: list,
    AbstractSet: frozenset,
}

_MAP_ORIGINS: frozenset[Any] = frozenset({dict, Mapping})

# Shapes of classes and type aliases, filled once per key
_SHAPES: dict[Any, Shape] = {}
_IN_PROGRESS: set[Any] = set()


def extract_shape(py_type: Any) -> Shape:
    """Convert a Python type annotation to a shape request."""
    origin = get_origin(py_type)
    args = get_args(py_type)

    if py_type is Any or py_type is object:
        return AnyShape()

    if py_type is IgnoredAny:
        return IgnoredShape()

    if py_type is None or py_type is type(None):
        return UnitShape()

    # Expand PEP 695 type aliases
    if isinstance(py_type, TypeAliasType):
        value = py_type.__value__
        return _cached_shape(py_type, py_type.__name__, lambda: extract_shape(value))
    if isinstance(origin, TypeAliasType):
        type_params = origin.__type_params__
        if len(type_params) != len(args):
            msg = (
                f"Type alias {origin.__name__} expects {len(type_params)} "
                f"arguments but got {len(args)}"
            )
            raise SchemaError(msg)
        substitutions = dict(zip(type_params, args, strict=True))
        expanded = _substitute_type_params(origin.__value__, substitutions)
        return _cached_shape(py_type, origin.__name__, lambda: extract_shape(expanded))

    if origin is Annotated:
        return extract_shape(args[0])

    if py_type in _PRIMITIVES:
        return PrimitiveShape(py_type)

    # Homogeneous sequences
    if origin in _SEQUENCE_CONTAINERS:
        if not args:
            msg = f"{origin.__name__} type must have an element type"
            raise SchemaError(msg)
        return SeqShape(element=extract_shape(args[0]), container=_SEQUENCE_CONTAINERS[origin])

    if origin in _MAP_ORIGINS:
        if len(args) != 2:
            msg = f"{origin.__name__} type must have key and value types"
            raise SchemaError(msg)
        return MapShape(key=extract_shape(args[0]), value=extract_shape(args[1]))

    if origin is tuple:
        if not args:
            msg = "tuple type must have element types"
            raise SchemaError(msg)
        if len(args) == 2 and args[1] is Ellipsis:
            return SeqShape(element=extract_shape(args[0]), container=tuple)
        return TupleShape(elements=tuple(extract_shape(arg) for arg in args))

    if origin is Literal:
        for val in args:
            if not isinstance(val, str):
                msg = f"Literal values must be str, got {type(val)}"
                raise SchemaError(msg)
        return EnumShape(
            name=f"Literal[{', '.join(map(repr, args))}]",
            variants=tuple(Variant(name=val, value=val) for val in args),
        )

    if isinstance(py_type, types.UnionType) or origin is Union:
        return _extract_union(args)

    if isinstance(py_type, type):
        return _class_shape(py_type)

    msg = f"Cannot extract shape from: {py_type}"
    raise SchemaError(msg)


def type_name(cls: type) -> str:
    """The identifier a named node must carry to select ``cls``."""
    if issubclass(cls, Record):
        return cls._tag
    return cls.__name__


def _extract_union(options: tuple[Any, ...]) -> Shape:
    present = tuple(opt for opt in options if opt is not type(None))
    inner = extract_shape(present[0]) if len(present) == 1 else _union_enum(present)
    if len(present) != len(options):
        return OptionShape(inner)
    return inner


def _union_enum(options: tuple[Any, ...]) -> EnumShape:
    """An enum whose variants are the classes of a union."""
    variants: list[Variant] = []
    for option in options:
        if not isinstance(option, type) or option in _PRIMITIVES:
            msg = f"Union members must be record or dataclass types, got {option}"
            raise SchemaError(msg)
        variants.append(Variant(name=type_name(option), payload=extract_shape(option)))

    names = [v.name for v in variants]
    if len(set(names)) != len(names):
        msg = f"Union members must have distinct identifiers, got {names}"
        raise SchemaError(msg)
    return EnumShape(name=" | ".join(names), variants=tuple(variants))


# =============================================================================
# Class Shapes
# =============================================================================


def _class_shape(cls: type) -> Shape:
    return _cached_shape(cls, cls.__qualname__, lambda: _build_class_shape(cls))


def _cached_shape(key: Any, label: str, build: Callable[[], Shape]) -> Shape:
    """Build the shape of a class or type alias once, referencing it while in progress."""
    if (cached := _SHAPES.get(key)) is not None:
        return cached
    if key in _IN_PROGRESS:
        return RefShape(key)

    _IN_PROGRESS.add(key)
    try:
        shape = build()
    finally:
        _IN_PROGRESS.discard(key)

    if shape == RefShape(key):
        msg = f"Type {label} refers only to itself"
        raise SchemaError(msg)

    logger.trace("extracted %s shape for %s", shape.kind, label)
    _SHAPES[key] = shape
    return shape


def _build_class_shape(cls: type) -> Shape:
    if issubclass(cls, enum.Enum):
        return EnumShape(
            name=cls.__name__,
            variants=tuple(Variant(name=member.name, value=member) for member in cls),
        )

    # NamedTuple
    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        hints = get_type_hints(cls)
        return TupleStructShape(
            name=cls.__name__,
            elements=tuple(extract_shape(hints[name]) for name in cls._fields),
            build=cls,
        )

    if not dataclasses.is_dataclass(cls):
        msg = f"Cannot extract shape from: {cls}"
        raise SchemaError(msg)

    name = type_name(cls)
    form = cls._form if issubclass(cls, Record) else "struct"
    hints = get_type_hints(cls)
    init_fields = [f for f in dataclasses.fields(cls) if f.init]

    if not init_fields:
        return UnitStructShape(name=name, build=cls)

    if form == "tuple":
        return TupleStructShape(
            name=name,
            elements=tuple(extract_shape(hints[f.name]) for f in init_fields),
            build=cls,
        )

    if form == "newtype":
        if len(init_fields) != 1:
            msg = f"newtype record {cls.__name__} must have exactly one field"
            raise SchemaError(msg)
        return NewtypeShape(name=name, inner=extract_shape(hints[init_fields[0].name]), build=cls)

    struct_fields = tuple(_field_shape(f, hints[f.name]) for f in init_fields)
    _check_roles(cls, struct_fields)
    return StructShape(
        name=name,
        fields=struct_fields,
        build=cls,
        allow_unknown=issubclass(cls, Record) and cls._allow_unknown,
    )


def _field_shape(field: dataclasses.Field[Any], hint: Any) -> FieldShape:
    key = identifier_of(field)
    has_default = (
        field.default is not dataclasses.MISSING
        or field.default_factory is not dataclasses.MISSING
    )
    return FieldShape(
        name=field.name,
        key=key,
        shape=extract_shape(hint),
        role=FieldRole.for_identifier(key),
        required=not has_default,
    )


def _check_roles(cls: type, struct_fields: tuple[FieldShape, ...]) -> None:
    roles = [f.role for f in struct_fields if f.role is not FieldRole.PLAIN]
    for role in set(roles):
        if roles.count(role) > 1:
            msg = f"{cls.__name__} declares more than one {role.value} field"
            raise SchemaError(msg)
    if FieldRole.TRANSPARENT in roles and FieldRole.NAME not in roles:
        msg = f"{cls.__name__} declares a transparent field without a name field"
        raise SchemaError(msg)


# =============================================================================
# Type Parameter Substitution
# =============================================================================


def _substitute_type_params(type_expr: Any, substitutions: dict[Any, Any]) -> Any:
    """
    Recursively substitute type parameters in a type expression.

    Args:
        type_expr: The type expression to substitute in
        substitutions: Mapping from type parameters to their concrete types

    Returns:
        The type expression with parameters substituted
    """
    if type_expr in substitutions:
        return substitutions[type_expr]

    origin = get_origin(type_expr)
    args = get_args(type_expr)
    if origin is None or not args:
        return type_expr

    new_args = tuple(_substitute_type_params(arg, substitutions) for arg in args)

    # Unions created by the | operator can't be subscripted
    if isinstance(type_expr, types.UnionType):
        result = new_args[0]
        for arg in new_args[1:]:
            result = result | arg
        return result

    return origin[new_args]
