"""Integration tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from cartograph.cli import app
from cartograph.parser import parse_dsl

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "Cartograph v" in result.output


class TestCheckCommand:
    """Tests for 'cartograph check'."""

    def test_check_valid_file(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["check", str(sample_dsl_file)])

        assert result.exit_code == 0
        assert "Parsed 12 predicates and 10 definitions." in result.output
        assert "No warnings." in result.output

    def test_check_reports_warnings(self, temp_dir: Path):
        path = temp_dir / "warn.cmap"
        path.write_text("software -- implements -> functionality\n", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 0
        assert "Warnings (2)" in result.output
        assert "missing_definition" in result.output

    def test_check_reports_syntax_error(self, temp_dir: Path):
        path = temp_dir / "broken.cmap"
        path.write_text("A -- r -> B\nnot a predicate\n", encoding="utf-8")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert "Invalid predicate syntax on line 2" in result.output

    def test_check_reports_undecodable_file(self, temp_dir: Path):
        path = temp_dir / "binary.cmap"
        path.write_bytes(b"A -- r -> \xff\xfe\n")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert "cannot read file" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_check_missing_file(self, temp_dir: Path):
        result = runner.invoke(app, ["check", str(temp_dir / "nope.cmap")])

        assert result.exit_code != 0


class TestShowCommand:
    """Tests for 'cartograph show'."""

    def test_show_active_neighbourhood(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["show", str(sample_dsl_file), "--active", "software", "--distance", "1"])

        assert result.exit_code == 0
        assert "Active: software" in result.output
        assert "Total nodes: 10 | Visible: 6" in result.output
        assert "Total edges: 12 | Visible: 5" in result.output

    def test_show_one_way(self, sample_dsl_file: Path):
        result = runner.invoke(
            app, ["show", str(sample_dsl_file), "--active", "users", "--distance", "1", "--one-way"],
        )

        assert result.exit_code == 0
        assert "Bidirectional: no" in result.output
        assert "Visible: 2" in result.output

    def test_show_selection_only(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["show", str(sample_dsl_file), "--select", "users"])

        assert result.exit_code == 0
        assert "Active: -" in result.output
        assert "Total nodes: 10 | Visible: 3" in result.output

    def test_show_random_active_with_seed(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["show", str(sample_dsl_file), "--seed", "3"])

        assert result.exit_code == 0
        assert "Active: -" not in result.output

    def test_show_tree(self, sample_dsl_file: Path):
        result = runner.invoke(
            app, ["show", str(sample_dsl_file), "--active", "planning", "--distance", "1", "--tree"],
        )

        assert result.exit_code == 0
        assert "ASCII graph:" in result.output
        assert "|-produces-> specification" in result.output

    def test_show_unknown_concept(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["show", str(sample_dsl_file), "--active", "sofware"])

        assert result.exit_code != 0

    def test_show_undecodable_file(self, temp_dir: Path):
        path = temp_dir / "binary.cmap"
        path.write_bytes(b"\xff\xfe")

        result = runner.invoke(app, ["show", str(path), "--active", "A"])

        assert result.exit_code == 1
        assert "cannot read file" in result.output

    def test_show_relationship_filter(self, sample_dsl_file: Path):
        result = runner.invoke(
            app,
            ["show", str(sample_dsl_file), "--active", "software", "--distance", "1", "-r", "implements"],
        )

        assert result.exit_code == 0
        assert "Total nodes: 10 | Visible: 2" in result.output
        assert "Total edges: 12 | Visible: 1" in result.output

    def test_show_unknown_relationship(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["show", str(sample_dsl_file), "--active", "software", "-r", "implement"])

        assert result.exit_code != 0

    def test_show_survives_non_table_config(self, sample_dsl_file: Path, temp_config: Path):
        temp_config.parent.mkdir(parents=True, exist_ok=True)
        temp_config.write_text('view = 3\nlogging = "x"\n', encoding="utf-8")

        result = runner.invoke(app, ["show", str(sample_dsl_file), "--active", "software"])

        assert result.exit_code == 0
        assert "Max distance: 2" in result.output

    def test_show_empty_map(self, temp_dir: Path):
        path = temp_dir / "empty.cmap"
        path.write_text("\n", encoding="utf-8")

        result = runner.invoke(app, ["show", str(path)])

        assert result.exit_code == 0
        assert "Concept map is empty." in result.output

    def test_show_uses_configured_defaults(self, sample_dsl_file: Path):
        runner.invoke(app, ["config", "set-view", "--distance", "0"])

        result = runner.invoke(app, ["show", str(sample_dsl_file), "--active", "software"])

        assert result.exit_code == 0
        assert "Max distance: 0" in result.output
        assert "Visible: 1" in result.output


class TestExportCommand:
    """Tests for 'cartograph export'."""

    def test_export_dsl_round_trips_predicates(self, sample_dsl_file: Path, sample_dsl: str):
        result = runner.invoke(app, ["export", str(sample_dsl_file)])

        assert result.exit_code == 0
        reparsed = parse_dsl(result.output)
        assert reparsed.ok
        assert set(reparsed.predicates) == set(parse_dsl(sample_dsl).predicates)

    def test_export_json_view(self, sample_dsl_file: Path):
        result = runner.invoke(
            app,
            ["export", str(sample_dsl_file), "--format", "json", "--active", "users", "--distance", "1"],
        )

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["name"] == "concepts"
        assert {n["id"] for n in payload["nodes"]} == {"users", "requirements", "interface"}

    def test_export_dot_to_file(self, sample_dsl_file: Path, temp_dir: Path):
        output = temp_dir / "map.dot"
        result = runner.invoke(app, ["export", str(sample_dsl_file), "-f", "dot", "-o", str(output)])

        assert result.exit_code == 0
        assert "Exported dot" in result.output
        assert output.read_text(encoding="utf-8").startswith('digraph "concepts"')

    def test_export_invalid_format(self, sample_dsl_file: Path):
        result = runner.invoke(app, ["export", str(sample_dsl_file), "--format", "svg"])

        assert result.exit_code != 0


def test_sample_command_output_parses():
    result = runner.invoke(app, ["sample"])

    assert result.exit_code == 0
    assert "software -- implements -> functionality" in result.output
    assert parse_dsl(result.output).ok


class TestConfigCommands:
    """Tests for 'cartograph config'."""

    def test_config_show_defaults(self, temp_config: Path):
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Max distance: 2" in result.output
        assert "Bidirectional: yes" in result.output
        assert "Log level: WARNING" in result.output

    def test_config_set_view(self, temp_config: Path):
        result = runner.invoke(app, ["config", "set-view", "--distance", "3", "--one-way"])

        assert result.exit_code == 0
        assert temp_config.exists()

        shown = runner.invoke(app, ["config", "show"])
        assert "Max distance: 3" in shown.output
        assert "Bidirectional: no" in shown.output
