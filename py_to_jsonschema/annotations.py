"""
Field metadata that can be attached where a type is referenced, and the
helpers that read it back out of an annotation set.

Metadata belongs to the referencing field, not the referenced type, so the
same Enum can carry different allow-lists in different parent classes:

```
@dataclass
class Foo:
    kind: Annotated[ElementType, EnumAllowList("MOVIE", "SERIAL")]
```
"""

# Standard
from typing import Any, Iterable, List, Tuple

# First Party
import alog

# Local
from .errors import MissingOrDuplicateAnnotationError

log = alog.use_channel("JSANNO")


class EnumAllowList(tuple):
    """The ordered list of string values permitted for an enum field"""

    def __new__(cls, *values: str):
        for value in values:
            if not isinstance(value, str):
                raise ValueError(
                    f"EnumAllowList values must be strings, got {type(value)}"
                )
        return super().__new__(cls, values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}{tuple(self)}"


class UnionMarker:
    """Presence-only flag marking a reference to a closed tagged union"""

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, UnionMarker)

    def __hash__(self) -> int:
        return hash(UnionMarker)

    def __repr__(self) -> str:
        return "UnionMarker()"


def extract_enum_allow_list(annotations: Iterable[Any]) -> List[str]:
    """Get the allow-list from the given annotation set

    Args:
        annotations (Iterable[Any])
            The annotations attached at the referencing field. Anything that
            is not an EnumAllowList is ignored.

    Returns:
        allow_list (List[str])
            The allowed values in declaration order
    """
    allow_list = _get_unique_annotation(annotations, EnumAllowList)
    log.debug3("Found enum allow-list %s", allow_list)
    return list(allow_list)


def extract_union_marker(annotations: Iterable[Any]) -> UnionMarker:
    """Make sure the annotation set carries exactly one UnionMarker"""
    return _get_unique_annotation(annotations, UnionMarker)


## Implementation Details ######################################################


def _get_annotations(annotations: Iterable[Any], annotation_type: type) -> Tuple:
    return tuple(anno for anno in annotations if isinstance(anno, annotation_type))


def _get_unique_annotation(annotations: Iterable[Any], annotation_type: type) -> Any:
    """Get the single annotation of the given type, raising if there are none or
    several
    """
    annos = _get_annotations(annotations, annotation_type)
    if len(annos) != 1:
        raise MissingOrDuplicateAnnotationError(annotation_type, len(annos))
    return annos[0]
