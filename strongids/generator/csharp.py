"""C# code generator for strongly-typed identifiers."""

from dataclasses import dataclass

from jinja2 import Environment, PackageLoader

from .types import DEFAULT_BACKING_KIND, BackingKind, StrongIdDescriptor

env = Environment(
    loader=PackageLoader("strongids.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("csharp.cs.j2")

DEFAULT_ATTRIBUTE_NAMESPACE = "StrongIds"


@dataclass(frozen=True)
class Profile:
    """Kind-specific C# fragments substituted into the shared template.

    Expressions refer to ``s``/``provider`` (parsing), ``other`` (comparison),
    ``reader`` and ``writer``/``value`` (JSON) as named in the template.
    """

    primitive: str
    description: str
    empty: str
    has_new: bool
    is_text: bool
    parse: str
    try_parse: str
    try_parse_value: str
    equals: str
    hash_code: str
    compare: str
    to_string: str
    json_description: str
    json_read: str
    json_write: str
    json_read_property: str
    invariant_text: str
    converter_description: str


def _numeric_profile(primitive: str, description: str, empty: str, reader: str) -> Profile:
    return Profile(
        primitive=primitive,
        description=description,
        empty=empty,
        has_new=False,
        is_text=False,
        parse=f"new({primitive}.Parse(s, provider))",
        try_parse=f"s is not null && {primitive}.TryParse(s, provider, out var value)",
        try_parse_value="value",
        equals="Value.Equals(other.Value)",
        hash_code="Value.GetHashCode()",
        compare="Value.CompareTo(other.Value)",
        to_string="Value.ToString()",
        json_description="a JSON number",
        json_read=f"From(reader.{reader}())",
        json_write="writer.WriteNumberValue(value.Value)",
        json_read_property="Parse(reader.GetString()!, CultureInfo.InvariantCulture)",
        invariant_text="value.Value.ToString(CultureInfo.InvariantCulture)",
        converter_description=f"a string or an <see cref=\"{primitive}\"/>",
    )


GUID_PROFILE = Profile(
    primitive="Guid",
    description="a <see cref=\"Guid\"/>",
    empty="Guid.Empty",
    has_new=True,
    is_text=False,
    parse="new(Guid.Parse(s, provider))",
    try_parse="s is not null && Guid.TryParse(s, provider, out var value)",
    try_parse_value="value",
    equals="Value.Equals(other.Value)",
    hash_code="Value.GetHashCode()",
    compare="Value.CompareTo(other.Value)",
    to_string="Value.ToString()",
    json_description="a JSON string",
    json_read="From(reader.GetGuid())",
    json_write="writer.WriteStringValue(value.Value)",
    json_read_property="Parse(reader.GetString()!, CultureInfo.InvariantCulture)",
    invariant_text="value.Value.ToString()",
    converter_description="a string or a <see cref=\"Guid\"/>",
)

INT_PROFILE = _numeric_profile("int", "a 32-bit integer", "0", "GetInt32")

LONG_PROFILE = _numeric_profile("long", "a 64-bit integer", "0L", "GetInt64")

STRING_PROFILE = Profile(
    primitive="string",
    description="a non-empty string",
    empty="string.Empty",
    has_new=False,
    is_text=True,
    parse="From(s)",
    try_parse="!string.IsNullOrEmpty(s)",
    try_parse_value="s",
    equals="string.Equals(Value ?? string.Empty, other.Value ?? string.Empty, StringComparison.Ordinal)",
    hash_code="StringComparer.Ordinal.GetHashCode(Value ?? string.Empty)",
    compare="string.CompareOrdinal(Value ?? string.Empty, other.Value ?? string.Empty)",
    to_string="Value ?? string.Empty",
    json_description="a JSON string",
    json_read="new(reader.GetString() ?? string.Empty)",
    json_write="writer.WriteStringValue(value.Value)",
    json_read_property="new(reader.GetString() ?? string.Empty)",
    invariant_text="value.Value ?? string.Empty",
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


def visibility(descriptor: StrongIdDescriptor) -> str:
    return "public" if descriptor.is_public else "internal"


def output_name(descriptor: StrongIdDescriptor) -> str:
    """File name of the generated source for a descriptor."""
    return f"{descriptor.fully_qualified_name}.g.cs"


def render(descriptor: StrongIdDescriptor) -> str:
    """Render a strongly-typed identifier to C# source code."""
    return template.render(
        id=descriptor,
        p=profile(descriptor.backing_kind),
        vis=visibility(descriptor),
    )


def attribute(namespace: str = DEFAULT_ATTRIBUTE_NAMESPACE) -> str:
    """Render the marker attribute and BackingType enum that user code annotates with."""
    attribute_template = env.get_template("csharp-attribute.cs.j2")
    return attribute_template.render(
        namespace=namespace,
        kinds=list(BackingKind),
        default=DEFAULT_BACKING_KIND,
    )
