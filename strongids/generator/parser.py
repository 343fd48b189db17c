"""Declaration file parser using Lark."""

import dataclasses
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from lark import Lark, Token
from lark.visitors import Transformer

from .types import (
    ArgumentKind,
    AttributeArgument,
    AttributeUsage,
    TypeDeclaration,
    TypeKind,
    qualify,
)

logger = logging.getLogger(__name__)

_g_parser: Lark | None = None


class ValidationError(RuntimeError):
    """Raised when declaration validation fails."""


@dataclass
class _QualifiedName:
    value: str


@dataclass
class _Modifier:
    value: str


@dataclass
class _Using:
    value: str


@dataclass
class _Value:
    kind: ArgumentKind
    value: Any


@dataclass
class _Arguments:
    values: list[AttributeArgument]


@dataclass
class _AttributeSection:
    attributes: list[AttributeUsage]


@dataclass
class _Namespace:
    name: str
    members: list[Any]


TFilter = TypeVar("TFilter", bound=object)


def _filter(args: list[Any], class_type: type[TFilter]) -> list[TFilter]:
    return [v for v in args if isinstance(v, class_type)]


def _find_one(args: list[Any], class_type: type[object]) -> Any:
    filtered = _filter(args, class_type)
    if len(filtered) == 0:
        return None
    if len(filtered) > 1:
        raise RuntimeError(f"Found more than one {class_type}")
    return filtered[0]


def _parse_integer(text: str) -> int:
    digits = text.rstrip("uUlL").replace("_", "")
    negative = digits.startswith("-")
    if negative:
        digits = digits[1:]
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    else:
        value = int(digits, 10)
    return -value if negative else value


class TreeTransformer(Transformer):
    """Transform parse tree into declaration types."""

    def start(self, args: list[Any]) -> list[Any]:
        return [arg for arg in args if not isinstance(arg, _Using)]

    def file_namespace(self, args: list[Any]) -> _Namespace:
        return _Namespace(
            name=_find_one(args, _QualifiedName).value,
            members=[arg for arg in args[1:] if not isinstance(arg, _Using)],
        )

    def namespace_block(self, args: list[Any]) -> _Namespace:
        return self.file_namespace(args)

    def using_directive(self, args: list[Any]) -> _Using:
        return _Using(value=_find_one(args, _QualifiedName).value)

    def type_declaration(self, args: list[Any]) -> TypeDeclaration:
        sections = _filter(args, _AttributeSection)
        return TypeDeclaration(
            name=str(_find_one(args, Token)),
            namespace="",
            kind=_find_one(args, TypeKind),
            modifiers=[m.value for m in _filter(args, _Modifier)],
            attributes=[attr for section in sections for attr in section.attributes],
        )

    def modifier(self, args: list[Any]) -> _Modifier:
        return _Modifier(value=str(args[0]))

    def struct_kind(self, args: list[Any]) -> TypeKind:
        return TypeKind.STRUCT

    def record_struct_kind(self, args: list[Any]) -> TypeKind:
        return TypeKind.RECORD_STRUCT

    def class_kind(self, args: list[Any]) -> TypeKind:
        return TypeKind.CLASS

    def record_class_kind(self, args: list[Any]) -> TypeKind:
        return TypeKind.RECORD_CLASS

    def interface_kind(self, args: list[Any]) -> TypeKind:
        return TypeKind.INTERFACE

    def attribute_section(self, args: list[Any]) -> _AttributeSection:
        return _AttributeSection(attributes=_filter(args, AttributeUsage))

    def attribute(self, args: list[Any]) -> AttributeUsage:
        arguments = _find_one(args, _Arguments)
        return AttributeUsage(
            name=_find_one(args, _QualifiedName).value,
            arguments=arguments.values if arguments else [],
        )

    def attribute_arguments(self, args: list[Any]) -> _Arguments:
        return _Arguments(values=_filter(args, AttributeArgument))

    def argument(self, args: list[Any]) -> AttributeArgument:
        name = _find_one(args, Token)
        value = _find_one(args, _Value)
        return AttributeArgument(
            name=str(name) if name is not None else None,
            kind=value.kind,
            value=value.value,
        )

    def cast_expression(self, args: list[Any]) -> _Value:
        # The cast target is irrelevant; only the operand carries the value.
        return _find_one(args, _Value)

    def member_reference(self, args: list[Any]) -> _Value:
        return _Value(kind=ArgumentKind.MEMBER, value=args[0].value)

    def integer_literal(self, args: list[Any]) -> _Value:
        return _Value(kind=ArgumentKind.INTEGER, value=_parse_integer(str(args[0])))

    def string_literal(self, args: list[Any]) -> _Value:
        return _Value(kind=ArgumentKind.STRING, value=str(args[0])[1:-1])

    def qualified_name(self, args: list[Any]) -> _QualifiedName:
        return _QualifiedName(value=".".join(str(arg) for arg in args))


def _flatten(items: list[Any], namespace: str) -> Iterator[TypeDeclaration]:
    for item in items:
        if isinstance(item, _Namespace):
            yield from _flatten(item.members, qualify(namespace, item.name))
        elif isinstance(item, TypeDeclaration):
            yield dataclasses.replace(item, namespace=namespace)


def validate(declarations: list[TypeDeclaration]) -> None:
    """Validate parsed declarations."""
    seen: set[str] = set()
    for declaration in declarations:
        name = declaration.fully_qualified_name
        if name in seen:
            raise ValidationError(f"{name} is declared more than once")
        seen.add(name)


def parse(text: str) -> list[TypeDeclaration]:
    """Parse a declaration file into type declarations, in source order."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/declarations.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar)

    tree = _g_parser.parse(text)
    items = TreeTransformer().transform(tree)

    declarations = list(_flatten(items, ""))
    logger.debug("Parsed %d type declaration(s)", len(declarations))

    validate(declarations)

    return declarations
