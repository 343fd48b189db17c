"""Extraction of strong-id descriptors from annotated declarations."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .types import (
    DEFAULT_BACKING_KIND,
    ArgumentKind,
    AttributeArgument,
    AttributeUsage,
    BackingKind,
    StrongIdDescriptor,
    TypeDeclaration,
    qualify,
)

logger = logging.getLogger(__name__)

MARKER_NAMES = frozenset(["StrongId", "StrongIdAttribute"])

BACKING_ARGUMENT_NAME = "backingType"


def find_marker(declaration: TypeDeclaration) -> AttributeUsage | None:
    """Return the marker attribute applied to a declaration, if any."""
    for attribute in declaration.attributes:
        if attribute.simple_name in MARKER_NAMES:
            return attribute
    return None


def _backing_argument(marker: AttributeUsage) -> AttributeArgument | None:
    for argument in marker.arguments:
        if argument.name is None or argument.name == BACKING_ARGUMENT_NAME:
            return argument
    return None


def resolve_backing_kind(argument: AttributeArgument | None) -> BackingKind:
    """Map the marker's backing-type argument to a kind.

    Anything that does not resolve to one of the known enumerants falls back
    to the default kind.
    """
    if argument is None:
        return DEFAULT_BACKING_KIND
    if argument.kind == ArgumentKind.INTEGER:
        return coerce_backing_kind(argument.value)
    if argument.kind == ArgumentKind.MEMBER:
        member = str(argument.value).rsplit(".", 1)[-1]
        for kind in BackingKind:
            if kind.marker_name == member:
                return kind
    return DEFAULT_BACKING_KIND


def coerce_backing_kind(value: Any) -> BackingKind:
    """Normalize a backing kind given as a kind, selector or member name."""
    if isinstance(value, BackingKind):
        return value
    if isinstance(value, bool):
        return DEFAULT_BACKING_KIND
    if isinstance(value, int):
        try:
            return BackingKind(value)
        except ValueError:
            return DEFAULT_BACKING_KIND
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return coerce_backing_kind(int(text))
        for kind in BackingKind:
            if text.lower() in (kind.marker_name.lower(), kind.name.lower()):
                return kind
    return DEFAULT_BACKING_KIND


def is_valid_name(name: Any) -> bool:
    """Whether a value can be used as a wrapper type name."""
    return isinstance(name, str) and name.isidentifier()


def is_valid_namespace(namespace: Any) -> bool:
    """Whether a value is empty or a dotted path of identifiers."""
    if not isinstance(namespace, str):
        return False
    return not namespace or all(part.isidentifier() for part in namespace.split("."))


def descriptor(
    name: str,
    namespace: str = "",
    backing_kind: Any = DEFAULT_BACKING_KIND,
    is_public: bool = True,
) -> StrongIdDescriptor:
    """Build a descriptor from generation inputs held directly by a driver."""
    return StrongIdDescriptor(
        namespace=namespace,
        name=name,
        fully_qualified_name=qualify(namespace, name),
        backing_kind=coerce_backing_kind(backing_kind),
        is_public=is_public,
    )


def descriptor_from_dict(data: Mapping[str, Any]) -> StrongIdDescriptor:
    """Build a descriptor from a JSON-shaped mapping.

    Raises ValueError when the name or namespace is missing or malformed.
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"Expected a descriptor object, got {data!r}")
    name = data.get("name")
    namespace = data.get("namespace") or ""
    if not is_valid_name(name):
        raise ValueError(f"{name!r} is not a valid identifier")
    if not is_valid_namespace(namespace):
        raise ValueError(f"{namespace!r} is not a valid namespace")

    return descriptor(
        name=name,
        namespace=namespace,
        backing_kind=data.get("backing_kind"),
        is_public=bool(data.get("is_public", True)),
    )


def extract(declaration: TypeDeclaration) -> StrongIdDescriptor | None:
    """Normalize an annotated declaration into a descriptor.

    Returns None when the declaration is not annotated or is not a
    plain struct.
    """
    marker = find_marker(declaration)
    if marker is None:
        return None
    if not declaration.kind.is_plain_struct:
        logger.debug(
            "Skipping %s: %s is not a plain struct",
            declaration.fully_qualified_name,
            declaration.kind,
        )
        return None

    return descriptor(
        name=declaration.name,
        namespace=declaration.namespace,
        backing_kind=resolve_backing_kind(_backing_argument(marker)),
        is_public=declaration.is_public,
    )


def extract_all(declarations: Iterable[TypeDeclaration]) -> list[StrongIdDescriptor]:
    """Extract descriptors for every applicable declaration, in order."""
    descriptors = []
    for declaration in declarations:
        result = extract(declaration)
        if result is not None:
            descriptors.append(result)
    return descriptors
