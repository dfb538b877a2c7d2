"""
This module defines the read-only interface that a type descriptor must expose
for it to be converted to a JSON Schema. Descriptors are produced by a
collaborator (see dataclass_to_descriptor and proto_to_descriptor) and are
never constructed or modified by the converter itself.
"""

# Standard
from typing import Any, Sequence, Tuple
import abc
import dataclasses

# Local
from .errors import StructuralInvariantError
from .kinds import DescriptorKind


class TypeDescriptor(abc.ABC):
    __doc__ = __doc__

    ## Abstract Interface ######################################################

    @property
    @abc.abstractmethod
    def kind(self) -> DescriptorKind:
        """The raw kind of the described type"""

    @property
    @abc.abstractmethod
    def element_count(self) -> int:
        """The number of child elements"""

    @abc.abstractmethod
    def element_name(self, index: int) -> str:
        """The name of the child element at the given index"""

    @abc.abstractmethod
    def element_annotations(self, index: int) -> Sequence[Any]:
        """The metadata declared where the child element is defined"""

    @abc.abstractmethod
    def element_descriptor(self, index: int) -> "TypeDescriptor":
        """The descriptor for the type of the child element"""

    ## Shared Implementations ##################################################

    def variant_descriptors(self) -> Sequence["TypeDescriptor"]:
        """Get the descriptors of the concrete variants of a sealed union.

        The default layout has two top-level elements: a discriminator (its
        shape is ignored) and a holder whose own children are the variants.
        Descriptors that know their variants directly should override this.
        """
        if self.element_count != 2:
            raise StructuralInvariantError(
                expected=2, found=self.element_count, what="Sealed union descriptor"
            )
        holder = self.element_descriptor(1)
        return [holder.element_descriptor(i) for i in range(holder.element_count)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self.kind.value}>"


@dataclasses.dataclass(frozen=True)
class Element:
    """A named child of a StaticTypeDescriptor"""

    name: str
    descriptor: TypeDescriptor
    annotations: Tuple[Any, ...] = ()


@dataclasses.dataclass(frozen=True, repr=False)
class StaticTypeDescriptor(TypeDescriptor):
    """Plain-data descriptor for hand written type models"""

    descriptor_kind: DescriptorKind
    elements: Tuple[Element, ...] = ()
    serial_name: str = ""

    @property
    def kind(self) -> DescriptorKind:
        return self.descriptor_kind

    @property
    def element_count(self) -> int:
        return len(self.elements)

    def element_name(self, index: int) -> str:
        return self.elements[index].name

    def element_annotations(self, index: int) -> Sequence[Any]:
        return self.elements[index].annotations

    def element_descriptor(self, index: int) -> TypeDescriptor:
        return self.elements[index].descriptor

    def __repr__(self) -> str:
        if self.serial_name:
            return f"{type(self).__name__}<{self.kind.value}:{self.serial_name}>"
        return super().__repr__()


def element(name: str, descriptor: TypeDescriptor, *annotations: Any) -> Element:
    """Shorthand for building an Element with the given metadata"""
    return Element(name=name, descriptor=descriptor, annotations=tuple(annotations))


def static_descriptor(
    kind: DescriptorKind,
    *elements: Element,
    serial_name: str = "",
) -> StaticTypeDescriptor:
    """Shorthand for building a StaticTypeDescriptor"""
    return StaticTypeDescriptor(
        descriptor_kind=kind, elements=tuple(elements), serial_name=serial_name
    )
