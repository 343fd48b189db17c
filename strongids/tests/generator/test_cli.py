"""Tests for CLI interface."""

import json
import os
import tempfile

from click.testing import CliRunner

from strongids.generator.cli import cli

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def describe_gen_command():
    def generates_csharp_files(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(cli, ["gen", "-i", f"{FILE_DIR}/ids.cs", "-o", tmpdir])
            expect(result.exit_code) == 0
            expect(sorted(os.listdir(tmpdir))) == [
                "Shop.LineNumber.g.cs",
                "Shop.OrderId.g.cs",
                "Shop.Sequence.g.cs",
                "Shop.Slug.g.cs",
            ]
            with open(os.path.join(tmpdir, "Shop.Sequence.g.cs")) as f:
                content = f.read()
            expect("internal partial struct Sequence" in content) == True
            expect("Generated 4 file(s)" in result.output) == True

    def generates_python_files(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(
                cli, ["gen", "-l", "python", "-i", f"{FILE_DIR}/ids.cs", "-o", tmpdir]
            )
            expect(result.exit_code) == 0
            expect("shop_order_id.py" in os.listdir(tmpdir)) == True
            with open(os.path.join(tmpdir, "shop_slug.py")) as f:
                content = f.read()
            expect("class Slug:" in content) == True

    def generates_from_json_descriptors(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            descriptors = os.path.join(tmpdir, "ids.json")
            with open(descriptors, "w") as f:
                json.dump(
                    [
                        {"name": "OrderId", "namespace": "Shop", "backing_kind": 0},
                        {"name": "Slug", "backing_kind": "String", "is_public": False},
                    ],
                    f,
                )
            out = os.path.join(tmpdir, "out")
            result = runner.invoke(cli, ["gen", "-i", descriptors, "-o", out])
            expect(result.exit_code) == 0
            expect(sorted(os.listdir(out))) == ["Shop.OrderId.g.cs", "Slug.g.cs"]

    def _gen_from_json(content):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            descriptors = os.path.join(tmpdir, "ids.json")
            with open(descriptors, "w") as f:
                f.write(content)
            out = os.path.join(tmpdir, "out")
            result = runner.invoke(cli, ["gen", "-i", descriptors, "-o", out])
            written = os.listdir(out) if os.path.isdir(out) else []
        return result, written

    def fails_on_json_descriptor_without_name(expect):
        result, written = _gen_from_json('[{"namespace": "Shop"}]')
        expect(result.exit_code) == 1
        expect(result.exception.__class__) == SystemExit
        expect("Error in" in result.output) == True
        expect(written) == []

    def fails_on_invalid_json_identifiers(expect):
        result, written = _gen_from_json('[{"name": "Order Id", "namespace": "1Shop"}]')
        expect(result.exit_code) == 1
        expect("not a valid identifier" in result.output) == True
        expect(written) == []

    def fails_on_malformed_json(expect):
        result, written = _gen_from_json("{not json")
        expect(result.exit_code) == 1
        expect(result.exception.__class__) == SystemExit
        expect("Error in" in result.output) == True
        expect(written) == []

    def fails_on_non_object_json(expect):
        result, _ = _gen_from_json("42")
        expect(result.exit_code) == 1
        expect("Error in" in result.output) == True

    def fails_on_duplicate_outputs(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["gen", "-i", f"{FILE_DIR}/ids.cs", "-i", f"{FILE_DIR}/ids.cs", "-o", "/tmp"]
        )
        expect(result.exit_code) == 1
        expect("Duplicate output" in result.output) == True

    def fails_on_syntax_error(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            broken = os.path.join(tmpdir, "broken.cs")
            with open(broken, "w") as f:
                f.write("public partial struct {")
            result = runner.invoke(cli, ["gen", "-i", broken, "-o", tmpdir])
            expect(result.exit_code) == 1
            expect("Error in" in result.output) == True

    def fails_with_unknown_language(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["gen", "-l", "unknown", "-i", f"{FILE_DIR}/ids.cs", "-o", "/tmp/out"]
        )
        expect(result.exit_code) == 1
        expect("Unknown language" in result.output) == True

    def fails_with_missing_input(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["gen", "-i", "/nonexistent/ids.cs", "-o", "/tmp/out"])
        expect(result.exit_code) != 0

    def requires_input(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["gen", "-l", "csharp"])
        expect(result.exit_code) != 0
        expect("Missing option" in result.output) == True


def describe_render_command():
    def renders_to_stdout(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["render", "-n", "OrderId", "-s", "Shop"])
        expect(result.exit_code) == 0
        expect("namespace Shop;" in result.output) == True
        expect("public static OrderId New()" in result.output) == True

    def renders_internal_string_id(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["render", "-n", "Slug", "-b", "string", "--internal"])
        expect(result.exit_code) == 0
        expect("internal partial struct Slug" in result.output) == True
        expect("public string Value" in result.output) == False

    def accepts_numeric_backing(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["render", "-n", "LineNumber", "-b", "1"])
        expect(result.exit_code) == 0
        expect("public int Value { get; }" in result.output) == True

    def renders_python_to_file(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            output_file = os.path.join(tmpdir, "order_id.py")
            result = runner.invoke(
                cli, ["render", "-n", "OrderId", "-l", "python", "-o", output_file]
            )
            expect(result.exit_code) == 0
            with open(output_file) as f:
                expect("class OrderId:" in f.read()) == True

    def rejects_invalid_name(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["render", "-n", "Order-Id"])
        expect(result.exit_code) != 0
        expect("not a valid identifier" in result.output) == True

    def rejects_unknown_backing(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["render", "-n", "OrderId", "-b", "decimal"])
        expect(result.exit_code) != 0


def describe_attribute_command():
    def writes_attribute_source(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["attribute", "-s", "Acme.Ids"])
        expect(result.exit_code) == 0
        expect("namespace Acme.Ids" in result.output) == True
        expect("class StrongIdAttribute" in result.output) == True


def describe_info_command():
    def outputs_json(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", f"{FILE_DIR}/ids.cs", "--json"])
        expect(result.exit_code) == 0
        data = json.loads(result.output)
        expect([d["name"] for d in data]) == ["OrderId", "LineNumber", "Sequence", "Slug"]
        expect(data[2]["backing_kind"]) == "Long"
        expect(data[2]["is_public"]) == False
        expect(data[0]["output"]) == "Shop.OrderId.g.cs"

    def outputs_table(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", f"{FILE_DIR}/ids.cs"])
        expect(result.exit_code) == 0
        expect("Shop.OrderId" in result.output) == True
        expect("internal" in result.output) == True


def describe_main_group():
    def shows_help(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        expect(result.exit_code) == 0
        for command in ("gen", "render", "attribute", "info"):
            expect(command in result.output) == True
