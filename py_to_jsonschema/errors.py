"""
Exception types raised when a type descriptor tree cannot be converted to a
JSON Schema. All of them are ValueErrors since they indicate a defect in how
the type model (or its field metadata) was defined rather than a transient
condition.
"""

# Standard
from typing import Any, Optional, Sequence, Tuple


class SchemaConversionError(ValueError):
    """Base class for all conversion failures

    The path is the sequence of property names leading from the root
    descriptor to the descriptor that failed. It is filled in by the walker as
    the error unwinds through nested objects.
    """

    def __init__(self, reason: str, path: Optional[Sequence[str]] = None):
        self.reason = reason
        self.path: Tuple[str, ...] = tuple(path or ())
        super().__init__(self._format())

    def with_parent(self, name: str) -> "SchemaConversionError":
        """Prepend the name of the enclosing property to the error path"""
        self.path = (name,) + self.path
        self.args = (self._format(),)
        return self

    def _format(self) -> str:
        if self.path:
            return f"{self.reason} (at {'.'.join(self.path)})"
        return self.reason


class UnsupportedKindError(SchemaConversionError):
    """The descriptor's kind has no JSON Schema mapping"""

    def __init__(self, kind: Any, path: Optional[Sequence[str]] = None):
        self.kind = kind
        kind_name = getattr(kind, "value", kind)
        super().__init__(f"Descriptor with kind {kind_name} not supported", path)


class MissingOrDuplicateAnnotationError(SchemaConversionError):
    """A reference did not carry exactly one of a required field annotation"""

    def __init__(
        self,
        annotation_type: type,
        found: int,
        path: Optional[Sequence[str]] = None,
    ):
        self.annotation_type = annotation_type
        self.found = found
        super().__init__(
            f"Expected exactly one {annotation_type.__name__} annotation, found {found}",
            path,
        )


class StructuralInvariantError(SchemaConversionError):
    """A composite descriptor exposed an unexpected number of elements"""

    def __init__(
        self,
        expected: int,
        found: int,
        what: str = "Descriptor",
        path: Optional[Sequence[str]] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"{what} has returned inconsistent number of elements: expected {expected}, found {found}",
            path,
        )
