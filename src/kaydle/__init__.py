"""kaydle - Deserialize KDL node documents into typed Python values."""

from kaydle import magics
from kaydle.de import (
    # Entry points
    from_document,
    from_node,
    from_nodes,
    from_value,
)
from kaydle.document import (
    AnonymousNode,
    # Document model
    Document,
    Location,
    Node,
    Property,
    Value,
    ValueKind,
    document,
    node,
    value,
)
from kaydle.errors import (
    AmbiguousNode,
    AnonymousNodeNameMismatch,
    ArityMismatch,
    ConversionError,
    DeserializeError,
    DuplicateField,
    InvalidType,
    # Errors
    KaydleError,
    MissingField,
    MissingVariantSelector,
    NodeNameMismatch,
    NumberOutOfRange,
    RecursionLimitExceeded,
    SchemaError,
    TypeHintRequired,
    UnexpectedArguments,
    UnexpectedData,
    UnexpectedField,
    UnexpectedProperties,
    UnknownVariant,
    UnsupportedShape,
)
from kaydle.magics import rename
from kaydle.numbers import (
    # Numbers
    Number,
    NumberKind,
    NumberPolicy,
    default_number_policy,
)
from kaydle.options import DeserializeOptions
from kaydle.records import (
    IgnoredAny,
    # Targets
    Record,
)
from kaydle.schema import extract_shape

__all__ = [
    "AmbiguousNode",
    "AnonymousNode",
    "AnonymousNodeNameMismatch",
    "ArityMismatch",
    "ConversionError",
    "DeserializeError",
    "DeserializeOptions",
    # Document model
    "Document",
    "DuplicateField",
    "IgnoredAny",
    "InvalidType",
    # Errors
    "KaydleError",
    "Location",
    "MissingField",
    "MissingVariantSelector",
    "Node",
    "NodeNameMismatch",
    # Numbers
    "Number",
    "NumberKind",
    "NumberOutOfRange",
    "NumberPolicy",
    "Property",
    # Targets
    "Record",
    "RecursionLimitExceeded",
    "SchemaError",
    "TypeHintRequired",
    "UnexpectedArguments",
    "UnexpectedData",
    "UnexpectedField",
    "UnexpectedProperties",
    "UnknownVariant",
    "UnsupportedShape",
    "Value",
    "ValueKind",
    "default_number_policy",
    "document",
    # Schema extraction
    "extract_shape",
    # Entry points
    "from_document",
    "from_node",
    "from_nodes",
    "from_value",
    "magics",
    "node",
    "rename",
    "value",
]
