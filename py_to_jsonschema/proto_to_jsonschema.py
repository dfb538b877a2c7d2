# Standard
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

# Third Party
from google.protobuf import descriptor as _descriptor

# First Party
import alog

# Local
from .annotations import EnumAllowList, UnionMarker
from .converter import JsonSchemaConverter
from .descriptor import Element, StaticTypeDescriptor, TypeDescriptor
from .kinds import DescriptorKind
from .schema_nodes import SchemaNode

log = alog.use_channel("PRTO2J")


## Globals #####################################################################

_FD = _descriptor.FieldDescriptor

PROTO_TO_DESCRIPTOR_KINDS = {
    _FD.TYPE_BOOL: DescriptorKind.BOOLEAN,
    _FD.TYPE_INT32: DescriptorKind.INT,
    _FD.TYPE_SINT32: DescriptorKind.INT,
    _FD.TYPE_SFIXED32: DescriptorKind.INT,
    _FD.TYPE_UINT32: DescriptorKind.INT,
    _FD.TYPE_FIXED32: DescriptorKind.INT,
    _FD.TYPE_INT64: DescriptorKind.LONG,
    _FD.TYPE_SINT64: DescriptorKind.LONG,
    _FD.TYPE_SFIXED64: DescriptorKind.LONG,
    _FD.TYPE_UINT64: DescriptorKind.LONG,
    _FD.TYPE_FIXED64: DescriptorKind.LONG,
    _FD.TYPE_FLOAT: DescriptorKind.FLOAT,
    _FD.TYPE_DOUBLE: DescriptorKind.DOUBLE,
    _FD.TYPE_STRING: DescriptorKind.STRING,
    # NOTE: The canonical JSON mapping for bytes is a base64 string
    _FD.TYPE_BYTES: DescriptorKind.STRING,
}

# Well known message types that do not have a fixed shape
WELL_KNOWN_MESSAGE_KINDS = {
    "google.protobuf.Any": DescriptorKind.OPEN,
    "google.protobuf.Struct": DescriptorKind.CONTEXTUAL,
    "google.protobuf.Value": DescriptorKind.CONTEXTUAL,
    "google.protobuf.ListValue": DescriptorKind.CONTEXTUAL,
}

_DescriptorTypes = (_descriptor.Descriptor, _descriptor.EnumDescriptor)
_DescriptorTypesUnion = Union[_descriptor.Descriptor, _descriptor.EnumDescriptor]

## Interface ###################################################################


def proto_to_jsonschema(
    source: Any,
    *,
    type_mapping: Optional[Dict[int, DescriptorKind]] = None,
    require_union_marker: bool = False,
) -> SchemaNode:
    """Convert a protobuf message into a JSON Schema document

    Enum fields are constrained to the names of the enum's values and each
    (non-synthetic) oneof becomes an anyOf over its member fields.

    Args:
        source:  Any
            A message Descriptor or a generated message class

    Kwargs:
        type_mapping:  Optional[Dict[int, DescriptorKind]]
            A non-default mapping from proto field types to descriptor kinds
        require_union_marker:  bool
            Whether oneof references must carry a UnionMarker. The oneofs
            produced here always do.

    Returns:
        document:  Dict[str, Any]
            The JSON Schema document for the message
    """
    descriptor = proto_to_descriptor(source, type_mapping=type_mapping)
    return JsonSchemaConverter(require_union_marker=require_union_marker).accept(
        descriptor
    )


def proto_to_descriptor(
    source: Any,
    *,
    type_mapping: Optional[Dict[int, DescriptorKind]] = None,
) -> TypeDescriptor:
    """Build the TypeDescriptor for a protobuf message or enum

    Args:
        source:  Any
            A Descriptor, EnumDescriptor or a class with a DESCRIPTOR attribute

    Kwargs:
        type_mapping:  Optional[Dict[int, DescriptorKind]]
            A non-default mapping from proto field types to descriptor kinds

    Returns:
        descriptor:  TypeDescriptor
            The descriptor wrapping the proto definition
    """
    proto_descriptor = get_descriptor(source)
    if proto_descriptor is None:
        raise ValueError(f"Cannot get a protobuf descriptor from {source}")
    type_mapping = type_mapping or PROTO_TO_DESCRIPTOR_KINDS
    if isinstance(proto_descriptor, _descriptor.EnumDescriptor):
        return ProtoEnumTypeDescriptor(proto_descriptor)
    return ProtoMessageTypeDescriptor(proto_descriptor, type_mapping)


def get_descriptor(entry: Any) -> Optional[_DescriptorTypesUnion]:
    """Given an entry, try to get a message or enum descriptor from it"""
    if isinstance(entry, _DescriptorTypes):
        return entry
    descriptor_attr = getattr(entry, "DESCRIPTOR", None)
    if descriptor_attr and isinstance(descriptor_attr, _DescriptorTypes):
        return descriptor_attr
    return None


## Impl ########################################################################


class ProtoEnumTypeDescriptor(TypeDescriptor):
    """Enum descriptor whose elements are the enum's value names"""

    def __init__(self, enum_descriptor: _descriptor.EnumDescriptor):
        self.proto_descriptor = enum_descriptor

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.ENUM

    @property
    def element_count(self) -> int:
        return len(self.proto_descriptor.values)

    def element_name(self, index: int) -> str:
        return self.proto_descriptor.values[index].name

    def element_annotations(self, index: int) -> Sequence[Any]:
        return ()

    def element_descriptor(self, index: int) -> TypeDescriptor:
        return StaticTypeDescriptor(DescriptorKind.STRING)

    def allow_list(self) -> EnumAllowList:
        """The allow-list that references to this enum carry"""
        return EnumAllowList(*[value.name for value in self.proto_descriptor.values])

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self.proto_descriptor.full_name}>"


class _FieldElementsMixin:
    """Shared handling for descriptors whose children are proto fields"""

    type_mapping: Dict[int, DescriptorKind]

    def _get_elements(self) -> List[Element]:
        if self._elements is None:
            self._elements = self._build_elements()
        return self._elements

    def _field_element(self, field: _descriptor.FieldDescriptor) -> Element:
        descriptor = field_type_descriptor(field, self.type_mapping)
        annotations: Tuple[Any, ...] = ()
        if isinstance(descriptor, ProtoEnumTypeDescriptor):
            annotations = (descriptor.allow_list(),)
        return Element(name=field.name, descriptor=descriptor, annotations=annotations)

    @property
    def element_count(self) -> int:
        return len(self._get_elements())

    def element_name(self, index: int) -> str:
        return self._get_elements()[index].name

    def element_annotations(self, index: int) -> Sequence[Any]:
        return self._get_elements()[index].annotations

    def element_descriptor(self, index: int) -> TypeDescriptor:
        return self._get_elements()[index].descriptor


class ProtoMessageTypeDescriptor(_FieldElementsMixin, TypeDescriptor):
    """Descriptor over a message. Members of a oneof are replaced by a single
    sealed union element named after the oneof. Fields are read lazily.
    """

    def __init__(
        self,
        message_descriptor: _descriptor.Descriptor,
        type_mapping: Optional[Dict[int, DescriptorKind]] = None,
    ):
        self.proto_descriptor = message_descriptor
        self.type_mapping = type_mapping or PROTO_TO_DESCRIPTOR_KINDS
        self._elements: Optional[List[Element]] = None
        if message_descriptor.GetOptions().map_entry:
            self._kind = DescriptorKind.MAP
        else:
            self._kind = WELL_KNOWN_MESSAGE_KINDS.get(
                message_descriptor.full_name, DescriptorKind.CLASS
            )

    @property
    def kind(self) -> DescriptorKind:
        return self._kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self.proto_descriptor.full_name}>"

    def _build_elements(self) -> List[Element]:
        elements = []
        handled_oneofs = set()
        for field in self.proto_descriptor.fields:
            oneof = field.containing_oneof
            if oneof is not None and not _is_synthetic_oneof(oneof):
                if oneof.name not in handled_oneofs:
                    log.debug3(
                        "Handling oneof [%s.%s]",
                        self.proto_descriptor.name,
                        oneof.name,
                    )
                    handled_oneofs.add(oneof.name)
                    elements.append(
                        Element(
                            name=oneof.name,
                            descriptor=ProtoOneofTypeDescriptor(
                                oneof, self.type_mapping
                            ),
                            annotations=(UnionMarker(),),
                        )
                    )
                continue
            log.debug3("Handling field [%s.%s]", self.proto_descriptor.name, field.name)
            elements.append(self._field_element(field))
        return elements


class ProtoOneofTypeDescriptor(_FieldElementsMixin, TypeDescriptor):
    """Sealed union over the member fields of a oneof"""

    def __init__(
        self,
        oneof_descriptor: _descriptor.OneofDescriptor,
        type_mapping: Optional[Dict[int, DescriptorKind]] = None,
    ):
        self.proto_descriptor = oneof_descriptor
        self.type_mapping = type_mapping or PROTO_TO_DESCRIPTOR_KINDS
        self._elements: Optional[List[Element]] = None

    @property
    def kind(self) -> DescriptorKind:
        return DescriptorKind.SEALED

    def variant_descriptors(self) -> Sequence[TypeDescriptor]:
        return [self.element_descriptor(i) for i in range(self.element_count)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self.proto_descriptor.full_name}>"

    def _build_elements(self) -> List[Element]:
        return [self._field_element(field) for field in self.proto_descriptor.fields]


def field_type_descriptor(
    field: _descriptor.FieldDescriptor,
    type_mapping: Optional[Dict[int, DescriptorKind]] = None,
    *,
    as_item: bool = False,
) -> TypeDescriptor:
    """Get the descriptor for the type of a single field. Repeated fields are
    lists of the same field's type, unless they are map entries. With as_item,
    the descriptor for a single item of a repeated field is returned.
    """
    type_mapping = type_mapping or PROTO_TO_DESCRIPTOR_KINDS
    is_map = (
        field.type == _FD.TYPE_MESSAGE and field.message_type.GetOptions().map_entry
    )
    if not is_map and not as_item and field.is_repeated:
        item = field_type_descriptor(field, type_mapping, as_item=True)
        return StaticTypeDescriptor(
            DescriptorKind.LIST, (Element(name="0", descriptor=item),)
        )
    if field.type == _FD.TYPE_MESSAGE:
        return ProtoMessageTypeDescriptor(field.message_type, type_mapping)
    if field.type == _FD.TYPE_ENUM:
        return ProtoEnumTypeDescriptor(field.enum_type)
    if field.type not in type_mapping:
        raise ValueError(f"Invalid type specifier: {field.type}")
    return StaticTypeDescriptor(type_mapping[field.type])


def _is_synthetic_oneof(oneof: _descriptor.OneofDescriptor) -> bool:
    """proto3 optional fields are wrapped in a oneof named _<field>"""
    return len(oneof.fields) == 1 and oneof.name == f"_{oneof.fields[0].name}"
