"""
Common test helpers
"""

# Standard
import os

# Third Party
from google.protobuf import descriptor_pool, struct_pb2, timestamp_pb2
import pytest

# First Party
import alog

# Local
from py_to_jsonschema.annotations import EnumAllowList
from py_to_jsonschema.descriptor import element, static_descriptor
from py_to_jsonschema.kinds import DescriptorKind

from .helpers import ELEMENT_TYPE_VALUES

# Global logging config
alog.configure(
    default_level=os.environ.get("LOG_LEVEL", "info"),
    filters=os.environ.get("LOG_FILTERS", ""),
    formatter="json" if os.environ.get("LOG_JSON", "").lower() == "true" else "pretty",
    thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
)


@pytest.fixture
def temp_dpool():
    """Fixture to isolate the descriptor pool used in each test"""
    dpool = descriptor_pool.DescriptorPool()
    dpool.AddSerializedFile(struct_pb2.DESCRIPTOR.serialized_pb)
    dpool.AddSerializedFile(timestamp_pb2.DESCRIPTOR.serialized_pb)
    yield dpool


@pytest.fixture
def element_type_enum():
    """Enum descriptor with its declared values as elements"""
    return static_descriptor(
        DescriptorKind.ENUM,
        *[
            element(name, static_descriptor(DescriptorKind.CLASS))
            for name in ELEMENT_TYPE_VALUES
        ],
        serial_name="ElementType",
    )


@pytest.fixture
def nested_data(element_type_enum):
    """Class with a string, a boolean and an enum restricted by an allow-list"""
    return static_descriptor(
        DescriptorKind.CLASS,
        element("title", static_descriptor(DescriptorKind.STRING)),
        element("isBest", static_descriptor(DescriptorKind.BOOLEAN)),
        element(
            "elementType",
            element_type_enum,
            EnumAllowList(*ELEMENT_TYPE_VALUES),
        ),
        serial_name="NestedData",
    )
