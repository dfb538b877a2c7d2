"""
This module implements the recursive conversion from a TypeDescriptor tree to
a JSON Schema (draft-04) document. The converter only reads descriptors through
the TypeDescriptor interface, and it only reads field metadata from the
annotation set handed down by the referencing parent field.
"""

# Standard
from typing import Any, Dict, Sequence

# First Party
import alog

# Local
from .annotations import extract_enum_allow_list, extract_union_marker
from .descriptor import TypeDescriptor
from .errors import (
    SchemaConversionError,
    StructuralInvariantError,
    UnsupportedKindError,
)
from .kinds import Kind, classify
from .schema_nodes import (
    SchemaNode,
    any_of_node,
    array_node,
    boolean_node,
    enum_node,
    integer_node,
    number_node,
    object_node,
    schema_document,
    string_node,
)

log = alog.use_channel("JSCVRT")


## Globals #####################################################################

SCALAR_BUILDERS = {
    Kind.BOOLEAN: boolean_node,
    Kind.INTEGER: integer_node,
    Kind.NUMBER: number_node,
    Kind.STRING: string_node,
}

## Interface ###################################################################


def walk(
    descriptor: TypeDescriptor,
    annotations: Sequence[Any] = (),
    *,
    require_union_marker: bool = False,
) -> SchemaNode:
    """Convert a single descriptor (and everything beneath it) to a schema node

    Args:
        descriptor:  TypeDescriptor
            The descriptor to convert
        annotations:  Sequence[Any]
            The metadata attached at the field that references this descriptor

    Kwargs:
        require_union_marker:  bool
            Whether references to sealed unions must carry a UnionMarker

    Returns:
        node:  Dict[str, Any]
            The JSON Schema fragment for the descriptor
    """
    return JsonSchemaConverter(require_union_marker=require_union_marker).walk(
        descriptor, annotations
    )


def accept(
    descriptor: TypeDescriptor,
    *,
    require_union_marker: bool = False,
) -> SchemaNode:
    """Convert a root descriptor to a full JSON Schema document

    Args:
        descriptor:  TypeDescriptor
            The root descriptor

    Kwargs:
        require_union_marker:  bool
            Whether references to sealed unions must carry a UnionMarker

    Returns:
        document:  Dict[str, Any]
            The schema document with the $schema header as its first key
    """
    return JsonSchemaConverter(require_union_marker=require_union_marker).accept(
        descriptor
    )


## Impl ########################################################################


class JsonSchemaConverter:
    """Stateless converter holding only its configuration, so a single instance
    can be shared across threads
    """

    def __init__(self, *, require_union_marker: bool = False):
        self._require_union_marker = require_union_marker

    @property
    def require_union_marker(self) -> bool:
        return self._require_union_marker

    def accept(self, descriptor: TypeDescriptor) -> SchemaNode:
        log.debug("Converting root descriptor %s", descriptor)
        return schema_document(self.walk(descriptor))

    def walk(
        self,
        descriptor: TypeDescriptor,
        annotations: Sequence[Any] = (),
    ) -> SchemaNode:
        """This is the core recursive function. Kinds which need field metadata
        read it from the given annotations, composite kinds recurse on their
        children.
        """
        kind = classify(descriptor)

        if not kind.is_supported:
            log.debug2("Rejecting unsupported kind %s for %s", kind, descriptor)
            raise UnsupportedKindError(kind)

        if kind.is_scalar:
            log.debug3("Handling scalar %s", kind)
            return SCALAR_BUILDERS[kind]()

        if kind is Kind.ENUM:
            log.debug2("Handling enum %s", descriptor)
            return enum_node(extract_enum_allow_list(annotations))

        if kind is Kind.OBJECT:
            log.debug2("Handling object %s", descriptor)
            return self._convert_object(descriptor)

        if kind is Kind.ARRAY:
            log.debug2("Handling array %s", descriptor)
            return self._convert_array(descriptor)

        if kind is Kind.SEALED_UNION:
            log.debug2("Handling sealed union %s", descriptor)
            return self._convert_sealed_union(descriptor, annotations)

        raise UnsupportedKindError(kind)

    ## Implementation Details ##################################################

    def _convert_object(self, descriptor: TypeDescriptor) -> SchemaNode:
        properties: Dict[str, SchemaNode] = {}
        for idx in range(descriptor.element_count):
            element_name = descriptor.element_name(idx)
            log.debug3("Handling property [%s] (%d)", element_name, idx)
            if element_name in properties:
                log.warning(
                    "Duplicate property name %s in %s overwrites the earlier one",
                    element_name,
                    descriptor,
                )
            try:
                properties[element_name] = self.walk(
                    descriptor.element_descriptor(idx),
                    descriptor.element_annotations(idx),
                )
            except SchemaConversionError as err:
                err.with_parent(element_name)
                raise
        return object_node(properties)

    def _convert_array(self, descriptor: TypeDescriptor) -> SchemaNode:
        if descriptor.element_count != 1:
            raise StructuralInvariantError(
                expected=1, found=descriptor.element_count, what="Array descriptor"
            )
        return array_node(self.walk(descriptor.element_descriptor(0)))

    def _convert_sealed_union(
        self,
        descriptor: TypeDescriptor,
        annotations: Sequence[Any],
    ) -> SchemaNode:
        if self._require_union_marker:
            extract_union_marker(annotations)
        variants = descriptor.variant_descriptors()
        log.debug3("Found %d variants", len(variants))
        return any_of_node([self.walk(variant) for variant in variants])
