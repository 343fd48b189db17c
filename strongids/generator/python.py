"""Python code generator for strongly-typed identifiers."""

from dataclasses import dataclass

from jinja2 import Environment, PackageLoader

from .types import BackingKind, StrongIdDescriptor
from .util import to_snake_case

env = Environment(
    loader=PackageLoader("strongids.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("python.py.j2")


@dataclass(frozen=True)
class Profile:
    """Kind-specific Python fragments substituted into the shared template."""

    value_type: str
    description: str
    text_description: str
    empty: str
    has_new: bool
    is_text: bool
    is_integer: bool
    json_type: str
    json_description: str
    converter_description: str
    min_value: int | None = None
    max_value: int | None = None


def _integer_profile(bits: int) -> Profile:
    return Profile(
        value_type="int",
        description=f"a {bits}-bit integer",
        text_description="integer",
        empty="0",
        has_new=False,
        is_text=False,
        is_integer=True,
        json_type="int",
        json_description="a JSON number",
        converter_description="a string or an int",
        min_value=-(2 ** (bits - 1)),
        max_value=2 ** (bits - 1) - 1,
    )


GUID_PROFILE = Profile(
    value_type="uuid.UUID",
    description="a UUID",
    text_description="UUID",
    empty="uuid.UUID(int=0)",
    has_new=True,
    is_text=False,
    is_integer=False,
    json_type="str",
    json_description="a JSON string",
    converter_description="a string or a uuid.UUID",
)

INT_PROFILE = _integer_profile(32)

LONG_PROFILE = _integer_profile(64)

STRING_PROFILE = Profile(
    value_type="str",
    description="a non-empty string",
    text_description="string",
    empty='""',
    has_new=False,
    is_text=True,
    is_integer=False,
    json_type="str",
    json_description="a JSON string",
    converter_description="a string",
)


def profile(kind: BackingKind) -> Profile:
    """Select the profile for a backing kind."""
    if kind == BackingKind.GUID:
        return GUID_PROFILE
    if kind == BackingKind.INT:
        return INT_PROFILE
    if kind == BackingKind.LONG:
        return LONG_PROFILE
    if kind == BackingKind.STRING:
        return STRING_PROFILE
    raise ValueError(f"Unknown backing kind: {kind!r}")


def output_name(descriptor: StrongIdDescriptor) -> str:
    """Module file name of the generated source for a descriptor."""
    parts = descriptor.namespace.split(".") if descriptor.namespace else []
    parts.append(descriptor.name)
    return "_".join(to_snake_case(part) for part in parts) + ".py"


def render(descriptor: StrongIdDescriptor) -> str:
    """Render a strongly-typed identifier to Python source code."""
    return template.render(id=descriptor, p=profile(descriptor.backing_kind))
