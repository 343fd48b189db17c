"""Type definitions for declaration scanning and code generation."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Any

from dataclasses_json import DataClassJsonMixin


class BackingKind(IntEnum):
    """Primitive wrapped by a generated identifier.

    The integer value is the enumerant carried by the marker attribute.
    """

    GUID = 0
    INT = 1
    LONG = 2
    STRING = 3

    @property
    def marker_name(self) -> str:
        """Name of the matching ``BackingType`` member in C# source."""
        return self.name.capitalize()


DEFAULT_BACKING_KIND = BackingKind.GUID


class TypeKind(StrEnum):
    """Kind of a scanned type declaration."""

    STRUCT = "struct"
    RECORD_STRUCT = "record struct"
    CLASS = "class"
    RECORD_CLASS = "record class"
    INTERFACE = "interface"

    @property
    def is_plain_struct(self) -> bool:
        """Whether a generated partial struct can complete this declaration."""
        return self == TypeKind.STRUCT


class ArgumentKind(StrEnum):
    """Shape of an attribute argument expression."""

    INTEGER = "integer"
    MEMBER = "member"
    STRING = "string"


@dataclass
class AttributeArgument(DataClassJsonMixin):
    """Represents one argument passed to an attribute.

    ``value`` is an ``int`` for integer literals, the dotted member path for
    member references (``BackingType.Int``) and the unquoted text for strings.
    """

    name: str | None
    kind: ArgumentKind
    value: Any


@dataclass
class AttributeUsage(DataClassJsonMixin):
    """Represents an attribute applied to a declaration."""

    name: str
    arguments: list[AttributeArgument]

    @property
    def simple_name(self) -> str:
        """Attribute name without namespace qualification."""
        return self.name.rsplit(".", 1)[-1]


@dataclass
class TypeDeclaration(DataClassJsonMixin):
    """Represents a type declaration found in a source file."""

    name: str
    namespace: str
    kind: TypeKind
    modifiers: list[str]
    attributes: list[AttributeUsage]

    @property
    def fully_qualified_name(self) -> str:
        return qualify(self.namespace, self.name)

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_partial(self) -> bool:
        return "partial" in self.modifiers


@dataclass(frozen=True)
class StrongIdDescriptor(DataClassJsonMixin):
    """Normalized generation inputs for one strongly-typed identifier."""

    namespace: str
    name: str
    fully_qualified_name: str
    backing_kind: BackingKind
    is_public: bool

    @property
    def json_converter_name(self) -> str:
        return f"{self.name}JsonConverter"

    @property
    def type_converter_name(self) -> str:
        return f"{self.name}TypeConverter"


def qualify(namespace: str, name: str) -> str:
    """Join a namespace and a simple name, handling the global namespace."""
    return f"{namespace}.{name}" if namespace else name
