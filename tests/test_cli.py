"""Tests for the Click command-line interface."""

from click.testing import CliRunner

from lyricsmith import __version__, cli


def _write_inputs(directory, annotated, plain):
    source = directory / "song.xml"
    text = directory / "song.txt"
    source.write_text(annotated, encoding="utf-8")
    text.write_text(plain, encoding="utf-8")
    return str(source), str(text)


def test_version():
    runner = CliRunner()
    result = runner.invoke(cli.cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestAlignCommand:
    def test_aligned_lines(self, temp_dir, two_line_xml, two_line_text):
        source, text = _write_inputs(temp_dir, two_line_xml, two_line_text)
        runner = CliRunner()
        result = runner.invoke(cli.cli, ["align", source, text])

        assert result.exit_code == 0
        assert "annotated: Hel- | lo | wor- | ld+" in result.output
        assert "plain:     how | are | you" in result.output
        assert "All lines aligned" in result.output
        assert "7 annotated syllables, 7 plain syllables" in result.output

    def test_mismatched_line_is_flagged(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Jello")
        runner = CliRunner()
        result = runner.invoke(cli.cli, ["align", source, text])

        assert result.exit_code == 0
        assert "✗ Line 0:" in result.output
        assert "1 lines need merges" in result.output

    def test_missing_file(self, temp_dir):
        runner = CliRunner()
        result = runner.invoke(
            cli.cli, ["align", str(temp_dir / "nope.xml"), str(temp_dir / "nope.txt")]
        )
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_malformed_annotated_input(self, temp_dir):
        source, text = _write_inputs(temp_dir, "<vocals>", "la")
        runner = CliRunner()
        result = runner.invoke(cli.cli, ["align", source, text])
        assert result.exit_code == 1
        assert "Annotated Import Error" in result.output


class TestExportCommand:
    def test_export_with_merges(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Hello world")
        output = temp_dir / "out.xml"
        runner = CliRunner()
        result = runner.invoke(
            cli.cli,
            ["export", source, text, "-m", "0:0:annotated", "-o", str(output)],
        )

        assert result.exit_code == 0
        assert "Exported 3 records" in result.output
        content = output.read_text(encoding="utf-8")
        assert '<vocals count="3">' in content
        assert 'length="0.900" lyric="Hello"' in content

    def test_export_default_name(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Hello world")
        runner = CliRunner()
        with runner.isolated_filesystem(temp_dir=temp_dir):
            result = runner.invoke(cli.cli, ["export", source, text])
            assert result.exit_code == 0
            assert "exported_lyrics.xml" in result.output

    def test_invalid_merge_spec(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Hello world")
        runner = CliRunner()
        result = runner.invoke(
            cli.cli, ["export", source, text, "-m", "first", "-o", str(temp_dir / "o.xml")]
        )
        assert result.exit_code == 1
        assert "Invalid merge spec" in result.output

    def test_merge_line_out_of_range(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Hello world")
        output = temp_dir / "out.xml"
        runner = CliRunner()
        result = runner.invoke(
            cli.cli, ["export", source, text, "-m", "3:0:plain", "-o", str(output)]
        )
        assert result.exit_code == 1
        assert "Line index must be between 0 and 0" in result.output
        assert not output.exists()

    def test_wrong_output_extension(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Hello world")
        runner = CliRunner()
        result = runner.invoke(
            cli.cli, ["export", source, text, "-o", str(temp_dir / "out.txt")]
        )
        assert result.exit_code == 1
        assert ".xml" in result.output

    def test_misaligned_export_warns(self, temp_dir, hello_xml):
        source, text = _write_inputs(temp_dir, hello_xml, "Jello")
        runner = CliRunner()
        result = runner.invoke(
            cli.cli, ["export", source, text, "-o", str(temp_dir / "out.xml")]
        )
        assert result.exit_code == 0
        assert "1 lines still misaligned" in result.output


class TestReplayCommand:
    def test_passing_scenario(self, scenario_dir):
        runner = CliRunner()
        written = scenario_dir / "replayed.xml"
        result = runner.invoke(
            cli.cli,
            ["replay", str(scenario_dir / "test-case.json"), "--write", str(written)],
        )

        assert result.exit_code == 0
        assert "All records match" in result.output
        assert "hello-merge passed" in result.output
        assert written.read_text(encoding="utf-8") == (
            scenario_dir / "target.xml"
        ).read_text(encoding="utf-8")

    def test_failing_scenario(self, scenario_dir, hello_xml):
        (scenario_dir / "target.xml").write_text(hello_xml, encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli.cli, ["replay", str(scenario_dir / "test-case.json")])

        assert result.exit_code == 1
        assert "Record count mismatch" in result.output
        assert "hello-merge failed" in result.output

    def test_verbose_log_file(self, scenario_dir, temp_dir):
        log_file = temp_dir / "logs" / "run.log"
        runner = CliRunner()
        result = runner.invoke(
            cli.cli,
            ["--verbose", "--log-file", str(log_file), "replay", str(scenario_dir / "test-case.json")],
        )
        assert result.exit_code == 0
        assert "Replaying hello-merge" in log_file.read_text(encoding="utf-8")
