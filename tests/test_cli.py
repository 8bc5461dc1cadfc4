import json
from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner

from collection_openapi.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliExport:
    def test_export_json(self, tmp_path):
        output = tmp_path / "out" / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(FIXTURES / "sample.collection.json"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()
        doc = json.loads(output.read_text())
        assert doc["info"]["title"] == "Petstore"
        assert "Exported 5 operations across 4 paths." in result.output

    def test_export_yaml_by_suffix(self, tmp_path):
        output = tmp_path / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(FIXTURES / "sample.collection.json"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(output.read_text())
        assert doc["openapi"] == "3.1.0"
        assert "&id" not in output.read_text()

    def test_options_are_passed_through(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "export", str(FIXTURES / "sample.collection.json"),
                "-o", str(output),
                "--format", "json",
                "--title", "Pets API",
                "--api-key-header", "X-Fallback",
            ],
            env={"COLLECTION_OPENAPI_VERSION": "9.9.9"},
        )

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text())
        assert doc["info"]["title"] == "Pets API"
        assert doc["info"]["version"] == "9.9.9"
        # the fixture names its own header, so the fallback is unused
        assert doc["components"]["securitySchemes"]["apiKey"]["name"] == "X-Pet-Key"

    def test_skipped_requests_reported(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(FIXTURES / "requests.yaml"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Skipped 'Stream': unsupported method 'CONNECT'" in result.output

    def test_strict_fails_on_skipped(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(FIXTURES / "requests.yaml"), "-o", str(output), "--strict"])

        assert result.exit_code == 1
        assert output.exists()
        assert "1 requests were skipped" in result.output

    def test_unreadable_collection(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("42")
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(bad), "-o", str(tmp_path / "o.json")])

        assert result.exit_code == 1
        assert "Expected a collection object or list" in result.output

    @patch("collection_openapi.cli.DocumentAssembler")
    def test_export_uses_assembler(self, MockAssembler, tmp_path):
        MockAssembler.return_value.assemble.return_value = {
            "paths": {},
            "servers": [],
            "components": {"schemas": {}},
        }
        MockAssembler.return_value.context.omissions = []
        runner = CliRunner()
        result = runner.invoke(main, ["export", str(FIXTURES / "sample.collection.json"), "-o", str(tmp_path / "o.json")])

        assert result.exit_code == 0, result.output
        options = MockAssembler.call_args[0][0]
        assert options.max_schema_depth == 64
        MockAssembler.return_value.assemble.assert_called_once()


class TestCliValidate:
    def test_valid_document(self, tmp_path):
        doc = tmp_path / "openapi.json"
        doc.write_text(json.dumps({
            "openapi": "3.1.0",
            "info": {"title": "t", "version": "1"},
            "paths": {},
            "components": {},
        }))
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(doc)])
        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_invalid_document(self, tmp_path):
        doc = tmp_path / "openapi.yaml"
        doc.write_text(yaml.safe_dump({
            "openapi": "3.1.0",
            "info": {"title": "t", "version": "1"},
            "paths": {"/users/{id}": {"get": {"responses": {}}}},
            "components": {},
        }))
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(doc)])
        assert result.exit_code == 1
        assert "missing path parameters: id" in result.output

    def test_not_a_mapping(self, tmp_path):
        doc = tmp_path / "list.yaml"
        doc.write_text("- a\n- b\n")
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(doc)])
        assert result.exit_code == 1

    def test_empty_paths_section(self, tmp_path):
        doc = tmp_path / "openapi.yaml"
        doc.write_text("openapi: 3.1.0\ninfo: {title: t, version: '1'}\npaths:\ncomponents: {}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(doc)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "paths: 'paths' must be a mapping" in result.output
