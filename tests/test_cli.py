"""Tests for the CLI."""

import json

from typer.testing import CliRunner

from openapi_collections.cli import app

runner = CliRunner()


class TestInspect:
    """Tests for the inspect command."""

    def test_inspect_local_file(self, tmp_path, petstore_text):
        file_path = tmp_path / "openapi.json"
        file_path.write_text(petstore_text, encoding="utf-8")

        result = runner.invoke(app, ["inspect", str(file_path)])

        assert result.exit_code == 0
        assert "Petstore" in result.output
        assert "POST    https://api.example.com/v1/pets  - Create a pet" in result.output

    def test_inspect_json_output(self, tmp_path, petstore_text):
        file_path = tmp_path / "openapi.json"
        file_path.write_text(petstore_text, encoding="utf-8")

        result = runner.invoke(app, ["inspect", str(file_path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert list(data["groups"]) == ["Pets", "Default"]
        assert data["sync_enabled"] is True

    def test_inspect_invalid_file(self, tmp_path):
        file_path = tmp_path / "openapi.json"
        file_path.write_text("not json", encoding="utf-8")

        result = runner.invoke(app, ["inspect", str(file_path)])

        assert result.exit_code == 1


class TestListSources:
    """Tests for the list-sources command."""

    def test_list_sources(self, tmp_path):
        sources_file = tmp_path / "sources.yaml"
        sources_file.write_text("sources:\n  - url: https://api.example.com/openapi.json\n    sync_enabled: false\n")

        result = runner.invoke(app, ["list-sources", "--sources", str(sources_file)])

        assert result.exit_code == 0
        assert "https://api.example.com/openapi.json [paused]" in result.output

    def test_list_sources_with_name(self, tmp_path):
        sources_file = tmp_path / "sources.yaml"
        sources_file.write_text("sources:\n  - url: https://api.example.com/openapi.json\n    name: Petstore\n")

        result = runner.invoke(app, ["list-sources", "--sources", str(sources_file)])

        assert result.exit_code == 0
        assert "Petstore: https://api.example.com/openapi.json [sync]" in result.output
