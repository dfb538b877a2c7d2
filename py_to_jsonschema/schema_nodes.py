"""
Constructors for the JSON Schema fragments the converter emits. Each returns a
new dict holding exactly one of the supported shapes.
"""

# Standard
from typing import Any, Dict, Iterable, List

SchemaNode = Dict[str, Any]

## Globals #####################################################################

FIELD_TYPE = "type"
FIELD_PROPERTIES = "properties"
FIELD_ITEMS = "items"
FIELD_ENUM = "enum"
FIELD_ANY_OF = "anyOf"
FIELD_SCHEMA = "$schema"

TYPE_BOOLEAN = "boolean"
TYPE_INTEGER = "integer"
TYPE_NUMBER = "number"
TYPE_STRING = "string"
TYPE_OBJECT = "object"
TYPE_ARRAY = "array"

DRAFT_04_SCHEMA_URI = "http://json-schema.org/draft-04/schema"

## Scalars #####################################################################


def boolean_node() -> SchemaNode:
    return {FIELD_TYPE: TYPE_BOOLEAN}


def integer_node() -> SchemaNode:
    return {FIELD_TYPE: TYPE_INTEGER}


def number_node() -> SchemaNode:
    return {FIELD_TYPE: TYPE_NUMBER}


def string_node() -> SchemaNode:
    return {FIELD_TYPE: TYPE_STRING}


def enum_node(allow_list: Iterable[str]) -> SchemaNode:
    """String node restricted to the allow-list. Order and duplicates are kept
    as given.
    """
    return {FIELD_TYPE: TYPE_STRING, FIELD_ENUM: list(allow_list)}


## Composites ##################################################################


def object_node(properties: Dict[str, SchemaNode]) -> SchemaNode:
    return {FIELD_TYPE: TYPE_OBJECT, FIELD_PROPERTIES: properties}


def array_node(items: SchemaNode) -> SchemaNode:
    return {FIELD_TYPE: TYPE_ARRAY, FIELD_ITEMS: items}


def any_of_node(variants: List[SchemaNode]) -> SchemaNode:
    return {FIELD_ANY_OF: variants}


def schema_document(root: SchemaNode) -> SchemaNode:
    """Put the draft-04 header ahead of the root node's own keys"""
    document = {FIELD_SCHEMA: DRAFT_04_SCHEMA_URI}
    document.update(root)
    return document
