"""
Tests for proto_to_jsonschema
"""

# Third Party
from google.protobuf import descriptor as _descriptor
from google.protobuf import descriptor_pb2, struct_pb2, timestamp_pb2
import pytest

# Local
from py_to_jsonschema.annotations import EnumAllowList, UnionMarker
from py_to_jsonschema.errors import (
    MissingOrDuplicateAnnotationError,
    UnsupportedKindError,
)
from py_to_jsonschema.kinds import DescriptorKind
from py_to_jsonschema.proto_to_jsonschema import (
    field_type_descriptor,
    get_descriptor,
    proto_to_descriptor,
    proto_to_jsonschema,
)

## Helpers #####################################################################

_FD = _descriptor.FieldDescriptor
_FDP = descriptor_pb2.FieldDescriptorProto

PACKAGE = "foo.bar"


def field(name, number, field_type, *, repeated=False, **kwargs):
    return descriptor_pb2.FieldDescriptorProto(
        name=name,
        number=number,
        type=field_type,
        label=_FDP.LABEL_REPEATED if repeated else _FDP.LABEL_OPTIONAL,
        **kwargs,
    )


def child_message(name):
    return descriptor_pb2.DescriptorProto(
        name=name,
        field=[field("id", 1, _FD.TYPE_INT32)],
    )


def element_type_enum():
    return descriptor_pb2.EnumDescriptorProto(
        name="ElementType",
        value=[
            descriptor_pb2.EnumValueDescriptorProto(name="COLLECTION", number=0),
            descriptor_pb2.EnumValueDescriptorProto(name="MOVIE", number=1),
            descriptor_pb2.EnumValueDescriptorProto(name="SERIAL", number=2),
        ],
    )


def add_messages(dpool, *messages, dependency=()):
    """Add a file holding the given messages and the ElementType enum to the
    pool and return the pool
    """
    fd_proto = descriptor_pb2.FileDescriptorProto(
        name="foo.proto",
        package=PACKAGE,
        syntax="proto3",
        dependency=list(dependency),
        enum_type=[element_type_enum()],
        message_type=list(messages),
    )
    dpool.AddSerializedFile(fd_proto.SerializeToString())
    return dpool


## Happy Path ##################################################################


def test_proto_to_jsonschema_primitives(temp_dpool):
    """Make sure every scalar proto type maps to a JSON type"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field("title", 1, _FD.TYPE_STRING),
                field("is_best", 2, _FD.TYPE_BOOL),
                field("count", 3, _FD.TYPE_INT32),
                field("big", 4, _FD.TYPE_UINT64),
                field("ratio", 5, _FD.TYPE_DOUBLE),
                field("small_ratio", 6, _FD.TYPE_FLOAT),
                field("data", 7, _FD.TYPE_BYTES),
            ],
        ),
    )
    doc = proto_to_jsonschema(temp_dpool.FindMessageTypeByName("foo.bar.Foo"))
    assert doc == {
        "$schema": "http://json-schema.org/draft-04/schema",
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "is_best": {"type": "boolean"},
            "count": {"type": "integer"},
            "big": {"type": "integer"},
            "ratio": {"type": "number"},
            "small_ratio": {"type": "number"},
            "data": {"type": "string"},
        },
    }


def test_proto_to_jsonschema_enum_field(temp_dpool):
    """Make sure enum fields are restricted to the enum's value names"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field(
                    "element_type",
                    1,
                    _FD.TYPE_ENUM,
                    type_name=".foo.bar.ElementType",
                ),
            ],
        ),
    )
    doc = proto_to_jsonschema(temp_dpool.FindMessageTypeByName("foo.bar.Foo"))
    assert doc["properties"]["element_type"] == {
        "type": "string",
        "enum": ["COLLECTION", "MOVIE", "SERIAL"],
    }


def test_proto_to_jsonschema_nested_and_repeated(temp_dpool):
    """Make sure nested messages and repeated fields convert recursively"""
    add_messages(
        temp_dpool,
        child_message("Child"),
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field("child", 1, _FD.TYPE_MESSAGE, type_name=".foo.bar.Child"),
                field(
                    "children",
                    2,
                    _FD.TYPE_MESSAGE,
                    repeated=True,
                    type_name=".foo.bar.Child",
                ),
                field("tags", 3, _FD.TYPE_STRING, repeated=True),
            ],
        ),
    )
    props = proto_to_jsonschema(temp_dpool.FindMessageTypeByName("foo.bar.Foo"))[
        "properties"
    ]
    child_node = {"type": "object", "properties": {"id": {"type": "integer"}}}
    assert props["child"] == child_node
    assert props["children"] == {"type": "array", "items": child_node}
    assert props["tags"] == {"type": "array", "items": {"type": "string"}}


def test_proto_to_jsonschema_oneof(temp_dpool):
    """Make sure a oneof becomes a single anyOf property in place of its
    members
    """
    add_messages(
        temp_dpool,
        child_message("Child1"),
        child_message("Child2"),
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field("name", 1, _FD.TYPE_STRING),
                field(
                    "child1",
                    2,
                    _FD.TYPE_MESSAGE,
                    type_name=".foo.bar.Child1",
                    oneof_index=0,
                ),
                field(
                    "child2",
                    3,
                    _FD.TYPE_MESSAGE,
                    type_name=".foo.bar.Child2",
                    oneof_index=0,
                ),
                field("count", 4, _FD.TYPE_INT32),
            ],
            oneof_decl=[descriptor_pb2.OneofDescriptorProto(name="sealed_data")],
        ),
    )
    foo = temp_dpool.FindMessageTypeByName("foo.bar.Foo")
    props = proto_to_jsonschema(foo, require_union_marker=True)["properties"]
    assert list(props.keys()) == ["name", "sealed_data", "count"]
    child_node = {"type": "object", "properties": {"id": {"type": "integer"}}}
    assert props["sealed_data"] == {"anyOf": [child_node, child_node]}

    desc = proto_to_descriptor(foo)
    assert desc.element_annotations(1) == (UnionMarker(),)
    assert desc.element_descriptor(1).kind is DescriptorKind.SEALED


def test_proto_to_jsonschema_proto3_optional(temp_dpool):
    """Make sure proto3 optional fields are plain properties, not unions"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field("maybe", 1, _FD.TYPE_STRING, oneof_index=0, proto3_optional=True),
            ],
            oneof_decl=[descriptor_pb2.OneofDescriptorProto(name="_maybe")],
        ),
    )
    doc = proto_to_jsonschema(temp_dpool.FindMessageTypeByName("foo.bar.Foo"))
    assert doc["properties"] == {"maybe": {"type": "string"}}


def test_proto_to_jsonschema_generated_class():
    """Make sure a generated message class can be used directly"""
    doc = proto_to_jsonschema(timestamp_pb2.Timestamp)
    assert doc["properties"] == {
        "seconds": {"type": "integer"},
        "nanos": {"type": "integer"},
    }


def test_proto_to_jsonschema_generated_class_scalar_fields():
    """Make sure singular scalar fields of a generated class are not treated
    as lists
    """
    props = proto_to_jsonschema(timestamp_pb2.Timestamp)["properties"]
    assert props["seconds"] == {"type": "integer"}
    assert props["nanos"] == {"type": "integer"}


def test_field_type_descriptor_repeated(temp_dpool):
    """Make sure repeated fields become single-item lists and singular fields
    keep their own kind
    """
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field("tag", 1, _FD.TYPE_STRING),
                field("tags", 2, _FD.TYPE_STRING, repeated=True),
            ],
        ),
    )
    foo = temp_dpool.FindMessageTypeByName("foo.bar.Foo")
    tag_desc = field_type_descriptor(foo.fields_by_name["tag"])
    assert tag_desc.kind is DescriptorKind.STRING

    tags_desc = field_type_descriptor(foo.fields_by_name["tags"])
    assert tags_desc.kind is DescriptorKind.LIST
    assert tags_desc.element_count == 1
    assert tags_desc.element_descriptor(0).kind is DescriptorKind.STRING

    item_desc = field_type_descriptor(foo.fields_by_name["tags"], as_item=True)
    assert item_desc.kind is DescriptorKind.STRING


def test_proto_to_descriptor_enum(temp_dpool):
    """Make sure an enum descriptor exposes its values and allow-list"""
    add_messages(temp_dpool)
    desc = proto_to_descriptor(temp_dpool.FindEnumTypeByName("foo.bar.ElementType"))
    assert desc.kind is DescriptorKind.ENUM
    assert [desc.element_name(i) for i in range(desc.element_count)] == [
        "COLLECTION",
        "MOVIE",
        "SERIAL",
    ]
    assert desc.allow_list() == EnumAllowList("COLLECTION", "MOVIE", "SERIAL")


def test_proto_to_descriptor_custom_type_mapping(temp_dpool):
    """Make sure a custom type mapping can override scalar kinds"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo", field=[field("data", 1, _FD.TYPE_BYTES)]
        ),
    )
    foo = temp_dpool.FindMessageTypeByName("foo.bar.Foo")
    desc = proto_to_descriptor(foo, type_mapping={_FD.TYPE_BYTES: DescriptorKind.CHAR})
    assert desc.element_descriptor(0).kind is DescriptorKind.CHAR
    with pytest.raises(UnsupportedKindError):
        proto_to_jsonschema(foo, type_mapping={_FD.TYPE_BYTES: DescriptorKind.CHAR})


def test_get_descriptor():
    """Make sure descriptors are found on classes and passed through as-is"""
    assert get_descriptor(timestamp_pb2.Timestamp) is timestamp_pb2.Timestamp.DESCRIPTOR
    assert (
        get_descriptor(timestamp_pb2.Timestamp.DESCRIPTOR)
        is timestamp_pb2.Timestamp.DESCRIPTOR
    )
    assert get_descriptor("not a descriptor") is None


## Error Cases #################################################################


def test_proto_to_jsonschema_invalid_source():
    """Make sure something without a descriptor is rejected"""
    with pytest.raises(ValueError):
        proto_to_jsonschema("not valid")


def test_proto_to_jsonschema_map_field(temp_dpool):
    """Make sure map fields are rejected as unsupported"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field(
                    "labels",
                    1,
                    _FD.TYPE_MESSAGE,
                    repeated=True,
                    type_name=".foo.bar.Foo.LabelsEntry",
                ),
            ],
            nested_type=[
                descriptor_pb2.DescriptorProto(
                    name="LabelsEntry",
                    field=[
                        field("key", 1, _FD.TYPE_STRING),
                        field("value", 2, _FD.TYPE_STRING),
                    ],
                    options=descriptor_pb2.MessageOptions(map_entry=True),
                )
            ],
        ),
    )
    foo = temp_dpool.FindMessageTypeByName("foo.bar.Foo")
    assert proto_to_descriptor(foo).element_descriptor(0).kind is DescriptorKind.MAP
    with pytest.raises(UnsupportedKindError) as exc_info:
        proto_to_jsonschema(foo)
    assert exc_info.value.path == ("labels",)


def test_proto_to_jsonschema_struct_field(temp_dpool):
    """Make sure free-form Struct fields are rejected as unsupported"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field(
                    "extra",
                    1,
                    _FD.TYPE_MESSAGE,
                    type_name=".google.protobuf.Struct",
                ),
            ],
        ),
        dependency=[struct_pb2.DESCRIPTOR.name],
    )
    with pytest.raises(UnsupportedKindError):
        proto_to_jsonschema(temp_dpool.FindMessageTypeByName("foo.bar.Foo"))


def test_proto_to_jsonschema_repeated_enum(temp_dpool):
    """Make sure a repeated enum fails since list items carry no metadata"""
    add_messages(
        temp_dpool,
        descriptor_pb2.DescriptorProto(
            name="Foo",
            field=[
                field(
                    "element_types",
                    1,
                    _FD.TYPE_ENUM,
                    repeated=True,
                    type_name=".foo.bar.ElementType",
                ),
            ],
        ),
    )
    with pytest.raises(MissingOrDuplicateAnnotationError):
        proto_to_jsonschema(temp_dpool.FindMessageTypeByName("foo.bar.Foo"))


def test_proto_to_jsonschema_root_enum(temp_dpool):
    """Make sure a root enum fails since the root reference carries no metadata"""
    add_messages(temp_dpool)
    with pytest.raises(MissingOrDuplicateAnnotationError):
        proto_to_jsonschema(temp_dpool.FindEnumTypeByName("foo.bar.ElementType"))
