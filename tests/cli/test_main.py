"""Tests for the CLI entry point and commands."""

import json

import pytest

from sqlgrid import __version__
from sqlgrid.core.exceptions import InputError

PEOPLE = json.dumps(
    {
        "result_sets": [
            {
                "columns": [
                    {"name": "id", "type": "int", "index": 0},
                    {"name": "name", "type": "text", "index": 1},
                ],
                "rows": [{"id": 1, "name": "Alice"}, {"id": 2, "name": None}],
            }
        ],
        "total_execution_time_ms": 12,
    }
)

TWO_SETS = json.dumps([{"rows": [{"n": 1}]}, {"rows": [{"n": 2}, {"n": 3}]}])

GRID = [
    "┌───┬────┬───────┐",
    "│ # │ id │ name  │",
    "├───┼────┼───────┤",
    "│ 1 │ 1  │ Alice │",
    "├───┼────┼───────┤",
    "│ 2 │ 2  │ NULL  │",
    "└───┴────┴───────┘",
]


@pytest.mark.unit
class TestCliHelp:
    def test_help_flag(self, cli_runner):
        result = cli_runner("--help")
        assert result.exit_code == 0
        assert "render, select and export SQL query results" in result.stdout

    def test_no_args_shows_help(self, cli_runner):
        result = cli_runner()
        assert result.exit_code in (0, 2)
        assert "Usage" in result.output

    def test_unknown_command_fails(self, cli_runner):
        assert cli_runner("nonexistent-command").exit_code != 0


@pytest.mark.unit
class TestCliVersion:
    def test_version_flag(self, cli_runner):
        result = cli_runner("--version")
        assert result.exit_code == 0
        assert f"sqlgrid {__version__}" in result.stdout

    def test_version_short_flag(self, cli_runner):
        assert f"sqlgrid {__version__}" in cli_runner("-V").stdout


@pytest.mark.unit
class TestRenderCommand:
    def test_table(self, cli_runner):
        result = cli_runner("render", "-e", PEOPLE, "-f", "table", "--no-color")
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[: len(GRID)] == GRID
        assert lines[-1] == "Total execution time: 12ms"

    def test_global_display_options(self, cli_runner):
        result = cli_runner(
            "--border", "ascii", "--no-row-numbers", "--null-display", "-",
            "render", "-e", PEOPLE, "-f", "table", "--no-color",
        )
        assert result.exit_code == 0
        assert result.stdout.splitlines()[0] == "+----+-------+"
        assert "| 2  | -     |" in result.stdout

    def test_piped_output_defaults_to_csv(self, cli_runner):
        result = cli_runner("render", "-e", PEOPLE)
        assert result.exit_code == 0
        assert result.stdout == "id,name\n1,Alice\n2,\n"

    def test_tsv_without_header(self, cli_runner):
        result = cli_runner("render", "-e", PEOPLE, "-f", "tsv", "--no-header")
        assert result.stdout == "1\tAlice\n2\t\n"

    def test_multiple_sets_as_csv(self, cli_runner):
        result = cli_runner("render", "-e", TWO_SETS, "-f", "csv")
        assert result.stdout == "n\n1\n\n# Result Set 2\nn\n2\n3\n"

    def test_divider_between_sets(self, cli_runner):
        result = cli_runner(
            "--divider", "3=(%row_count% rows)3=",
            "render", "-e", TWO_SETS, "-f", "table", "--no-color",
        )
        assert result.exit_code == 0
        assert "===(2 rows)===" in result.stdout.splitlines()

    def test_file_argument(self, cli_runner, temp_dir):
        path = temp_dir / "people.json"
        path.write_text(PEOPLE)
        result = cli_runner("render", str(path), "-f", "csv")
        assert result.stdout == "id,name\n1,Alice\n2,\n"

    def test_stdin(self, cli_runner):
        result = cli_runner("render", "-f", "csv", input=PEOPLE)
        assert result.stdout == "id,name\n1,Alice\n2,\n"

    def test_invalid_json(self, cli_runner):
        result = cli_runner("render", "-e", "{oops")
        assert isinstance(result.exception, InputError)


@pytest.mark.unit
class TestSelectCommand:
    def test_single_cell_with_header(self, cli_runner):
        result = cli_runner("select", "-s", "3:11", "-e", PEOPLE)
        assert result.exit_code == 0
        assert result.stdout == "name\nAlice\n"

    def test_data_rows_default_to_tsv_with_header(self, cli_runner):
        result = cli_runner("select", "-s", "3:2", "-E", "5:2", "-e", PEOPLE)
        assert result.stdout == "id\tname\n1\tAlice\n2\t\n"

    def test_no_header_as_csv(self, cli_runner):
        result = cli_runner(
            "select", "-s", "3:6", "-E", "3:12", "--no-header", "-f", "csv", "-e", PEOPLE
        )
        assert result.stdout == "1,Alice\n"

    def test_defaults_from_config(self, cli_runner, temp_dir):
        config_file = temp_dir / "config.toml"
        config_file.write_text(
            '[results]\nselection_output_format = "csv"\ninclude_headers_on_selection = false\n'
        )
        result = cli_runner(
            "--config", str(config_file), "select", "-s", "3:2", "-E", "5:2", "-e", PEOPLE
        )
        assert result.stdout == "1,Alice\n2,\n"

    def test_null_cell_copies_as_empty(self, cli_runner):
        result = cli_runner("select", "-s", "5:12", "--no-header", "-e", PEOPLE)
        assert result.exit_code == 0
        assert result.stdout == "\n"

    def test_header_only_selection_is_empty(self, cli_runner):
        result = cli_runner("select", "-s", "1:6", "-E", "1:12", "-e", PEOPLE)
        assert isinstance(result.exception, InputError)

    def test_nothing_selected(self, cli_runner):
        result = cli_runner("select", "-s", "4:9", "-e", PEOPLE)
        assert isinstance(result.exception, InputError)

    def test_bad_position(self, cli_runner):
        result = cli_runner("select", "-s", "three", "-e", PEOPLE)
        assert result.exit_code == 2


@pytest.mark.integration
class TestExportCommand:
    def test_csv(self, cli_runner, temp_dir):
        path = temp_dir / "people.csv"
        result = cli_runner("export", "-o", str(path), "-e", PEOPLE)
        assert result.exit_code == 0
        assert path.read_bytes() == b"id,name\n1,Alice\n2,"
        assert f"Exported 18 bytes to {path} (csv)" in result.stdout

    def test_result_set_option(self, cli_runner, temp_dir):
        path = temp_dir / "second.tsv"
        result = cli_runner("export", "-o", str(path), "-r", "2", "-e", TWO_SETS)
        assert result.exit_code == 0
        assert path.read_bytes() == b"n\n2\n3"

    def test_no_header(self, cli_runner, temp_dir):
        path = temp_dir / "people.csv"
        cli_runner("export", "-o", str(path), "--no-header", "-e", PEOPLE)
        assert path.read_bytes() == b"1,Alice\n2,"

    def test_xlsx_fallback_notice(self, cli_runner, temp_dir, monkeypatch):
        monkeypatch.setattr("sqlgrid.export.service.xlsx_available", lambda: False)
        result = cli_runner("export", "-o", str(temp_dir / "people.xlsx"), "-e", PEOPLE)
        assert result.exit_code == 0
        assert "Warning: Spreadsheet export is unavailable" in result.output
        assert (temp_dir / "people.csv").exists()

    def test_xlsx(self, cli_runner, temp_dir):
        pytest.importorskip("openpyxl")
        path = temp_dir / "people.xlsx"
        result = cli_runner("export", "-o", str(path), "-e", PEOPLE)
        assert result.exit_code == 0
        assert "(xlsx)" in result.stdout
        assert path.stat().st_size > 0
