"""Command-line interface for strongids code generation."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

import click
from lark.exceptions import LarkError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from strongids.generator import csharp, python
from strongids.generator.extract import (
    descriptor,
    descriptor_from_dict,
    extract_all,
    find_marker,
    is_valid_name,
    is_valid_namespace,
)
from strongids.generator.parser import ValidationError, parse
from strongids.generator.types import BackingKind

if TYPE_CHECKING:
    from strongids.generator.types import StrongIdDescriptor

logger = logging.getLogger(__name__)

LANGUAGES = ("csharp", "python")

BACKING_CHOICES = [kind.marker_name for kind in BackingKind] + [str(kind.value) for kind in BackingKind]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("strongids").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _emitter(language: str) -> ModuleType:
    if language == "csharp":
        return csharp
    if language == "python":
        return python
    print(f"Unknown language: {language}")
    sys.exit(1)


def _validate_name(_ctx: click.Context, _param: click.Parameter, value: str) -> str:
    if not is_valid_name(value):
        raise click.BadParameter(f"{value!r} is not a valid identifier")
    return value


def _validate_namespace(_ctx: click.Context, _param: click.Parameter, value: str) -> str:
    if not is_valid_namespace(value):
        raise click.BadParameter(f"{value!r} is not a valid namespace")
    return value


def _load_json_descriptors(input_file: str) -> list[StrongIdDescriptor]:
    try:
        with open(input_file, encoding="utf-8") as f:
            data: Any = json.load(f)
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise ValueError("expected a descriptor object or a list of them")
        return [descriptor_from_dict(item) for item in data]
    except ValueError as exc:
        print(f"Error in {input_file}: {exc}")
        sys.exit(1)


def _load_declarations(input_file: str) -> list[StrongIdDescriptor]:
    with open(input_file, encoding="utf-8") as f:
        source = f.read()

    try:
        declarations = parse(source)
    except (LarkError, ValidationError) as exc:
        print(f"Error in {input_file}: {exc}")
        sys.exit(1)

    for declaration in declarations:
        if (
            find_marker(declaration) is not None
            and declaration.kind.is_plain_struct
            and not declaration.is_partial
        ):
            logger.warning(
                "%s is not declared partial; the generated part will not compile",
                declaration.fully_qualified_name,
            )

    return extract_all(declarations)


def _load(input_files: tuple[str, ...]) -> list[StrongIdDescriptor]:
    descriptors: list[StrongIdDescriptor] = []
    for input_file in input_files:
        if Path(input_file).suffix == ".json":
            found = _load_json_descriptors(input_file)
        else:
            found = _load_declarations(input_file)
        logger.debug("%s: %d strong id(s)", input_file, len(found))
        descriptors.extend(found)
    return descriptors


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Strongly-typed identifier code generator."""
    _configure_logging(verbose)


@cli.command()
@click.option(
    "--language", "-l", default="csharp", show_default=True, help="Target language (csharp, python)"
)
@click.option(
    "--input",
    "-i",
    "input_files",
    required=True,
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Declaration file, or JSON descriptor list (*.json). Repeatable.",
)
@click.option("--output", "-o", "output_dir", default=".", help="Output directory")
def gen(language: str, input_files: tuple[str, ...], output_dir: str) -> None:
    """Generate a source file for every annotated declaration."""
    emitter = _emitter(language)
    descriptors = _load(input_files)

    outputs: dict[str, StrongIdDescriptor] = {}
    for item in descriptors:
        filename = emitter.output_name(item)
        if filename in outputs:
            print(f"Duplicate output {filename} for {item.fully_qualified_name}")
            sys.exit(1)
        outputs[filename] = item

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    for filename, item in outputs.items():
        (out / filename).write_text(emitter.render(item), encoding="utf-8")
        logger.debug("Wrote %s", out / filename)

    print(f"Generated {len(outputs)} file(s) in {out}")


@cli.command()
@click.option("--name", "-n", required=True, callback=_validate_name, help="Wrapper type name")
@click.option(
    "--namespace", "-s", default="", callback=_validate_namespace, help="Namespace (default: global)"
)
@click.option(
    "--backing",
    "-b",
    default=BackingKind.GUID.marker_name,
    show_default=True,
    type=click.Choice(BACKING_CHOICES, case_sensitive=False),
    help="Backing type",
)
@click.option("--internal", is_flag=True, default=False, help="Generate internal visibility")
@click.option(
    "--language", "-l", default="csharp", show_default=True, help="Target language (csharp, python)"
)
@click.option("--output", "-o", "output_file", default=None, help="Output file (default: stdout)")
def render(
    name: str,
    namespace: str,
    backing: str,
    internal: bool,
    language: str,
    output_file: str | None,
) -> None:
    """Render a single strong id from command-line inputs."""
    emitter = _emitter(language)
    generated_file = emitter.render(
        descriptor(name, namespace=namespace, backing_kind=backing, is_public=not internal)
    )

    if output_file is None:
        sys.stdout.write(generated_file)
        return

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated_file)


@cli.command()
@click.option(
    "--namespace",
    "-s",
    default=csharp.DEFAULT_ATTRIBUTE_NAMESPACE,
    show_default=True,
    callback=_validate_namespace,
    help="Namespace of the attribute",
)
@click.option("--output", "-o", "output_file", default=None, help="Output file (default: stdout)")
def attribute(namespace: str, output_file: str | None) -> None:
    """Generate the [StrongId] marker attribute source."""
    generated_file = csharp.attribute(namespace)

    if output_file is None:
        sys.stdout.write(generated_file)
        return

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated_file)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_files",
    required=True,
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Declaration file, or JSON descriptor list (*.json). Repeatable.",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_files: tuple[str, ...], output_json: bool) -> None:
    """Display the strong ids found in declaration files."""
    descriptors = _load(input_files)

    if output_json:
        _output_json(descriptors)
    else:
        _output_plain(descriptors)


def _output_json(descriptors: list[StrongIdDescriptor]) -> None:
    """Output descriptors as JSON."""
    data = []
    for item in descriptors:
        entry = item.to_dict()
        entry["backing_kind"] = item.backing_kind.marker_name
        entry["output"] = csharp.output_name(item)
        data.append(entry)

    print(json.dumps(data, indent=2))


def _output_plain(descriptors: list[StrongIdDescriptor]) -> None:
    """Output descriptors using rich text formatting."""
    console = Console()

    if not descriptors:
        console.print("[dim]No strong ids found[/dim]")
        return

    console.print("[bold cyan]Strong ids[/bold cyan]")
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Name", style="white")
    table.add_column("Backing", style="yellow")
    table.add_column("Visibility", style="dim")
    table.add_column("Output", style="green")

    for item in descriptors:
        table.add_row(
            item.fully_qualified_name,
            item.backing_kind.marker_name,
            csharp.visibility(item),
            csharp.output_name(item),
        )

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli(auto_envvar_prefix="STRONGIDS")


if __name__ == "__main__":
    main()
