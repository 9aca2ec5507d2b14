"""Tests for the command line interfaces."""

import json
from pathlib import Path

from typer.testing import CliRunner

from fix_pdbqt_elem.cli import find_cmd, fix_cmd

runner = CliRunner()


class TestFixCommand:
    """Tests for the fix-pdbqt-elem command."""

    def test_writes_default_output(self, fixable_pdbqt: Path) -> None:
        """Test that the default template writes a fixed copy next to the input."""
        result = runner.invoke(fix_cmd.app, [str(fixable_pdbqt)])

        assert result.exit_code == 0
        fixed = fixable_pdbqt.parent / "ligand_fixed.pdbqt"
        assert fixed.exists()
        assert "?" not in fixed.read_text()
        assert "written to file" in result.output

    def test_output_template(self, fixable_pdbqt: Path, tmp_path: Path) -> None:
        """Test that the output template places the fixed file."""
        template = str(tmp_path / "out" / "{name}.pdbqt")
        result = runner.invoke(fix_cmd.app, [str(fixable_pdbqt), "-o", template])

        assert result.exit_code == 0
        assert (tmp_path / "out" / "ligand.pdbqt").exists()

    def test_failure_reported(self, ambiguous_pdbqt: Path) -> None:
        """Test that a failed line is reported and the file left untouched."""
        result = runner.invoke(fix_cmd.app, [str(ambiguous_pdbqt), "--inplace"])

        assert result.exit_code == 1
        assert "unsupported element C on line 2" in result.output
        assert "skipped failed file" in result.output
        assert "?" in ambiguous_pdbqt.read_text()

    def test_guesses_option(self, ambiguous_pdbqt: Path) -> None:
        """Test that --guesses write lets ambiguous elements through."""
        result = runner.invoke(
            fix_cmd.app, [str(ambiguous_pdbqt), "--inplace", "--guesses", "write"]
        )

        assert result.exit_code == 0
        assert "?" not in ambiguous_pdbqt.read_text()

    def test_stdin_to_stdout(self, fixable_text: str) -> None:
        """Test that standard input is repaired to standard output."""
        result = runner.invoke(fix_cmd.app, ["--quiet"], input=fixable_text)

        assert result.exit_code == 0
        assert result.stdout.count("\n") == fixable_text.count("\n")
        assert "?" not in result.stdout

    def test_json_output(
        self, fixable_pdbqt: Path, ambiguous_pdbqt: Path, tmp_path: Path
    ) -> None:
        """Test that --json prints the run statistics."""
        template = str(tmp_path / "out" / "@.pdbqt")
        result = runner.invoke(
            fix_cmd.app,
            [str(fixable_pdbqt), str(ambiguous_pdbqt), "-o", template, "--json"],
        )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["lines"] == {"fixed": 4, "untouched": 0, "error": 1}
        assert data["files"] == {"fixed": 1, "untouched": 0, "error": 1}
        assert data["results"][1]["failed_lines"] == [2]

    def test_colliding_outputs_rejected(
        self, fixable_pdbqt: Path, clean_pdbqt: Path
    ) -> None:
        """Test that several inputs rendering to one output path are rejected."""
        result = runner.invoke(
            fix_cmd.app, [str(fixable_pdbqt), str(clean_pdbqt), "-o", "same.pdbqt"]
        )
        assert result.exit_code == 2

    def test_distinct_outputs_from_path_only(
        self, tmp_path: Path, fixable_text: str
    ) -> None:
        """Test that a template naming outputs by directory alone is accepted."""
        inputs = []
        for name in ("d1/x.pdbqt", "d2/y.pdbqt"):
            path = tmp_path / name
            path.parent.mkdir()
            path.write_text(fixable_text)
            inputs.append(str(path))

        result = runner.invoke(fix_cmd.app, [*inputs, "-o", "{path}/fixed.pdbqt"])

        assert result.exit_code == 0
        assert "?" not in (tmp_path / "d1" / "fixed.pdbqt").read_text()
        assert "?" not in (tmp_path / "d2" / "fixed.pdbqt").read_text()

    def test_stdin_matches_file_mode(self, tmp_path: Path, make_line) -> None:
        """Test that stdin and file input repair the same bytes identically."""
        shifted = make_line(" O  ", "LYS", serial=1)
        shifted = shifted[:35] + "\u00e9" + shifted[36:]
        data = (shifted + "\n" + make_line(" O  ", "LYS", serial=2) + "\n").encode()
        path = tmp_path / "lig.pdbqt"
        path.write_bytes(data)
        output_path = tmp_path / "out.pdbqt"

        file_run = runner.invoke(
            fix_cmd.app, [str(path), "-o", str(output_path), "-q"]
        )
        stdin_run = runner.invoke(fix_cmd.app, ["-q"], input=data)

        assert file_run.exit_code == 0
        assert stdin_run.exit_code == 0
        assert stdin_run.stdout_bytes == output_path.read_bytes()
        first, second = output_path.read_bytes().split(b"\n")[:2]
        assert first == data.split(b"\n")[0]
        assert second.endswith(b" OA")

    def test_version(self) -> None:
        """Test that --version prints the version."""
        result = runner.invoke(fix_cmd.app, ["--version"])

        assert result.exit_code == 0
        assert "1.0.1" in result.output


class TestFindCommand:
    """Tests for the find-unknown-elem command."""

    def test_json_report(self, fixable_pdbqt: Path, clean_pdbqt: Path) -> None:
        """Test that the scan report is printed as JSON."""
        result = runner.invoke(
            find_cmd.app,
            [str(fixable_pdbqt), str(clean_pdbqt), "--json", "-w", "1"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_scanned"] == 2
        assert data["affected_files"] == 1
        assert data["entries"][0]["unknown_count"] == 3

    def test_report_to_file(self, fixable_pdbqt: Path, tmp_path: Path) -> None:
        """Test that the scan report is written to the --output file."""
        report = tmp_path / "report.json"
        result = runner.invoke(
            find_cmd.app, [str(fixable_pdbqt), "-o", str(report), "-w", "1"]
        )

        assert result.exit_code == 0
        assert json.loads(report.read_text())["affected_files"] == 1
