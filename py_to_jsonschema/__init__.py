"""
This library holds utilities for converting type descriptors to JSON Schema.

References:
* https://json-schema.org/draft-04/schema

Example:

```
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

import py_to_jsonschema

class ElementType(Enum):
    COLLECTION = 1
    MOVIE = 2
    SERIAL = 3

@dataclass
class Foo:
    title: str
    is_best: bool
    # Only a subset of the enum is allowed here
    element_type: Annotated[
        ElementType,
        py_to_jsonschema.EnumAllowList("COLLECTION", "MOVIE"),
    ]

schema = py_to_jsonschema.dataclass_to_jsonschema(Foo)
```
"""

# Local
from .annotations import (
    EnumAllowList,
    UnionMarker,
    extract_enum_allow_list,
    extract_union_marker,
)
from .converter import JsonSchemaConverter, accept, walk
from .dataclass_to_jsonschema import dataclass_to_descriptor, dataclass_to_jsonschema
from .descriptor import StaticTypeDescriptor, TypeDescriptor
from .errors import (
    MissingOrDuplicateAnnotationError,
    SchemaConversionError,
    StructuralInvariantError,
    UnsupportedKindError,
)
from .kinds import DescriptorKind, Kind, classify
from .proto_to_jsonschema import proto_to_descriptor, proto_to_jsonschema
