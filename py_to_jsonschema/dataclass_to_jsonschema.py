# Standard
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Sequence, Tuple, Union
import dataclasses
import types
import typing

# First Party
import alog

# Local
from .converter import JsonSchemaConverter
from .descriptor import TypeDescriptor
from .kinds import DescriptorKind
from .schema_nodes import SchemaNode

log = alog.use_channel("DCLS2J")


## Globals #####################################################################

PY_TO_DESCRIPTOR_KINDS = {
    bool: DescriptorKind.BOOLEAN,
    str: DescriptorKind.STRING,
    float: DescriptorKind.DOUBLE,
    int: DescriptorKind.LONG,
}

# Element name used for the item type of a list, matching the index-based
# naming used for positional children
LIST_ITEM_NAME = "0"

## Interface ###################################################################


def dataclass_to_jsonschema(
    dataclass_: type,
    *,
    validate: bool = False,
    type_mapping: Optional[Dict[Any, DescriptorKind]] = None,
    require_union_marker: bool = False,
) -> SchemaNode:
    """Convert a dataclass into a JSON Schema document

    Field level metadata is given with typing.Annotated:

    ```
    @dataclass
    class Foo:
        kind: Annotated[ElementType, EnumAllowList("MOVIE", "SERIAL")]
        payload: Annotated[Union[Bar, Baz], UnionMarker()]
    ```

    Args:
        dataclass_:  type
            The dataclass class

    Kwargs:
        validate:  bool
            Whether or not to validate the class proactively
        type_mapping:  Optional[Dict[Any, DescriptorKind]]
            A non-default mapping from python types to descriptor kinds
        require_union_marker:  bool
            Whether Union fields must be annotated with a UnionMarker

    Returns:
        document:  Dict[str, Any]
            The JSON Schema document for the dataclass
    """
    descriptor = dataclass_to_descriptor(
        dataclass_, validate=validate, type_mapping=type_mapping
    )
    return JsonSchemaConverter(require_union_marker=require_union_marker).accept(
        descriptor
    )


def dataclass_to_descriptor(
    dataclass_: type,
    *,
    validate: bool = False,
    type_mapping: Optional[Dict[Any, DescriptorKind]] = None,
) -> "DataclassTypeDescriptor":
    """Build the TypeDescriptor for a dataclass (or any supported python type)

    Args:
        dataclass_:  type
            The dataclass class

    Kwargs:
        validate:  bool
            Whether or not to require that the root is a dataclass or Enum
        type_mapping:  Optional[Dict[Any, DescriptorKind]]
            A non-default mapping from python types to descriptor kinds

    Returns:
        descriptor:  DataclassTypeDescriptor
            The descriptor for the given type
    """
    if validate:
        log.debug2("Validating")
        if not _is_valid_root(dataclass_):
            raise ValueError(f"Invalid Schema: {dataclass_}")
    return DataclassTypeDescriptor(
        dataclass_, type_mapping=type_mapping or PY_TO_DESCRIPTOR_KINDS
    )


## Impl ########################################################################


class DataclassTypeDescriptor(TypeDescriptor):
    """TypeDescriptor implementation over python type hints. Child descriptors
    are built lazily the first time they are requested.
    """

    def __init__(
        self,
        source_type: Any,
        type_mapping: Optional[Dict[Any, DescriptorKind]] = None,
    ):
        self.type_mapping = type_mapping or PY_TO_DESCRIPTOR_KINDS
        self.source_type = _resolve_wrapped_type(source_type)
        self._kind = self._get_kind(self.source_type)
        self._elements: Optional[List[Tuple[str, Any, Tuple[Any, ...]]]] = None
        self._children: Dict[int, "DataclassTypeDescriptor"] = {}

    ## TypeDescriptor ##########################################################

    @property
    def kind(self) -> DescriptorKind:
        return self._kind

    @property
    def element_count(self) -> int:
        return len(self._get_elements())

    def element_name(self, index: int) -> str:
        return self._get_elements()[index][0]

    def element_annotations(self, index: int) -> Sequence[Any]:
        return self._get_elements()[index][2]

    def element_descriptor(self, index: int) -> "DataclassTypeDescriptor":
        child = self._children.get(index)
        if child is None:
            child = DataclassTypeDescriptor(
                self._get_elements()[index][1], type_mapping=self.type_mapping
            )
            self._children[index] = child
        return child

    def variant_descriptors(self) -> Sequence["DataclassTypeDescriptor"]:
        """The members of a Union are its variants, one element each"""
        return [self.element_descriptor(i) for i in range(self.element_count)]

    def __repr__(self) -> str:
        type_name = _type_name(self.source_type)
        return f"{type(self).__name__}<{self._kind.value}:{type_name}>"

    ## Implementation Details ##################################################

    def _get_kind(self, entry: Any) -> DescriptorKind:
        if isinstance(entry, type) and issubclass(entry, Enum):
            return DescriptorKind.ENUM
        if entry in self.type_mapping:
            return self.type_mapping[entry]
        origin = typing.get_origin(entry)
        if entry is list or origin is list:
            return DescriptorKind.LIST
        if entry is dict or origin is dict:
            return DescriptorKind.MAP
        if _is_union(entry):
            return DescriptorKind.SEALED
        if entry is Any:
            return DescriptorKind.CONTEXTUAL
        if dataclasses.is_dataclass(entry):
            return DescriptorKind.CLASS
        log.debug3("Treating %s as open polymorphic", entry)
        return DescriptorKind.OPEN

    def _get_elements(self) -> List[Tuple[str, Any, Tuple[Any, ...]]]:
        """Get the (name, type, annotations) triples for this type's children"""
        if self._elements is None:
            self._elements = self._build_elements()
        return self._elements

    def _build_elements(self) -> List[Tuple[str, Any, Tuple[Any, ...]]]:
        entry = self.source_type
        if self._kind is DescriptorKind.CLASS:
            hints = typing.get_type_hints(entry, include_extras=True)
            return [
                (field.name, hints[field.name], _get_annotations(hints[field.name]))
                for field in dataclasses.fields(entry)
            ]
        if self._kind is DescriptorKind.ENUM:
            return [(name, str, ()) for name in entry.__members__]
        if self._kind is DescriptorKind.LIST:
            return [(LIST_ITEM_NAME, arg, ()) for arg in typing.get_args(entry)]
        if self._kind is DescriptorKind.MAP:
            return [
                (name, arg, ())
                for name, arg in zip(("key", "value"), typing.get_args(entry))
            ]
        if self._kind is DescriptorKind.SEALED:
            return [
                (_type_name(_resolve_wrapped_type(arg)), arg, ())
                for arg in typing.get_args(entry)
            ]
        return []


def _is_valid_root(source_schema: Any) -> bool:
    return dataclasses.is_dataclass(source_schema) or (
        isinstance(source_schema, type) and issubclass(source_schema, Enum)
    )


def _is_union(entry: Any) -> bool:
    return typing.get_origin(entry) in (Union, types.UnionType)


def _type_name(entry: Any) -> str:
    return getattr(entry, "__name__", str(entry))


def _resolve_wrapped_type(field_type: Any) -> Any:
    """Unwrap the type inside an Annotated or Optional, or just return the type
    if not wrapped
    """
    origin = typing.get_origin(field_type)
    args = typing.get_args(field_type)

    # Unwrap Annotated and recurse in case it's an Annotated[Optional]
    if origin is Annotated:
        return _resolve_wrapped_type(args[0])

    # Unwrap Optional and recurse in case it's an Optional[Annotated]
    if _is_union(field_type) and type(None) in args:
        non_none_args = [arg for arg in args if arg is not type(None)]
        assert non_none_args, "Cannot have a union with only one NoneType arg"
        if len(non_none_args) > 1:
            res_type = Union.__getitem__(tuple(non_none_args))
        else:
            res_type = non_none_args[0]
        return _resolve_wrapped_type(res_type)

    return field_type


def _get_annotations(field_type: Any) -> Tuple[Any, ...]:
    """Get all Annotated metadata on the field type, looking through any
    Optional wrapping
    """
    origin = typing.get_origin(field_type)
    args = typing.get_args(field_type)
    if origin is Annotated:
        return tuple(args[1:]) + _get_annotations(args[0])
    if _is_union(field_type) and type(None) in args:
        non_none_args = [arg for arg in args if arg is not type(None)]
        if len(non_none_args) == 1:
            return _get_annotations(non_none_args[0])
    return ()
