"""
Kind tags for type descriptors and the classifier that maps the fine grained
kind a descriptor reports onto the conversion strategy used to build its
schema.
"""

# Standard
from enum import Enum

# First Party
import alog

log = alog.use_channel("JSKIND")


class DescriptorKind(Enum):
    """The raw kind reported by a descriptor"""

    ENUM = "enum"
    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    CHAR = "char"
    CLASS = "class"
    LIST = "list"
    MAP = "map"
    SEALED = "sealed"
    OPEN = "open"
    CONTEXTUAL = "contextual"


class Kind(Enum):
    """The conversion strategy for a descriptor"""

    ENUM = "enum"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    CHAR = "char"
    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"
    SEALED_UNION = "sealedUnion"
    OPEN_POLYMORPHIC = "openPolymorphic"
    CONTEXTUAL = "contextual"

    @property
    def is_scalar(self) -> bool:
        return self in _SCALAR_KINDS

    @property
    def is_supported(self) -> bool:
        return self not in _UNSUPPORTED_KINDS


_SCALAR_KINDS = frozenset([Kind.BOOLEAN, Kind.INTEGER, Kind.NUMBER, Kind.STRING])

_UNSUPPORTED_KINDS = frozenset(
    [Kind.CHAR, Kind.MAP, Kind.OPEN_POLYMORPHIC, Kind.CONTEXTUAL]
)

# NOTE: Every DescriptorKind must have an entry here so that classification is
#   total. Unsupported kinds still classify and are rejected by the walker.
DESCRIPTOR_KIND_TO_KIND = {
    DescriptorKind.ENUM: Kind.ENUM,
    DescriptorKind.BOOLEAN: Kind.BOOLEAN,
    DescriptorKind.BYTE: Kind.INTEGER,
    DescriptorKind.SHORT: Kind.INTEGER,
    DescriptorKind.INT: Kind.INTEGER,
    DescriptorKind.LONG: Kind.INTEGER,
    DescriptorKind.FLOAT: Kind.NUMBER,
    DescriptorKind.DOUBLE: Kind.NUMBER,
    DescriptorKind.STRING: Kind.STRING,
    DescriptorKind.CHAR: Kind.CHAR,
    DescriptorKind.CLASS: Kind.OBJECT,
    DescriptorKind.LIST: Kind.ARRAY,
    DescriptorKind.MAP: Kind.MAP,
    DescriptorKind.SEALED: Kind.SEALED_UNION,
    DescriptorKind.OPEN: Kind.OPEN_POLYMORPHIC,
    DescriptorKind.CONTEXTUAL: Kind.CONTEXTUAL,
}


def classify(descriptor) -> Kind:
    """Get the conversion strategy for the given descriptor

    Args:
        descriptor (TypeDescriptor)
            Any object exposing a DescriptorKind as its kind attribute

    Returns:
        kind (Kind)
            The classified kind. Unsupported kinds are returned as-is so that
            the caller decides how to fail.
    """
    kind = DESCRIPTOR_KIND_TO_KIND[descriptor.kind]
    log.debug3("Classified %s as %s", descriptor.kind, kind)
    return kind
