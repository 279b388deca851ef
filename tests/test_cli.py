"""Tests for the command line interface."""

import json

from click.testing import CliRunner

from vdf_keyvalues.__main__ import build_cli


def run(*args, input=None):
    return CliRunner().invoke(build_cli(), list(args), input=input)


class TestCli:
    def test_file_to_json(self, tmp_path, sample_vdf, sample_earliest):
        path = tmp_path / "sample.vdf"
        path.write_text(sample_vdf, encoding="utf-8")

        result = run(str(path))
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == sample_earliest

    def test_latest_flag(self, tmp_path, sample_vdf, sample_latest):
        path = tmp_path / "sample.vdf"
        path.write_text(sample_vdf, encoding="utf-8")

        result = run("--latest", str(path))
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == sample_latest

    def test_pairs_format_from_stdin(self):
        result = run("--format", "pairs", "-", input='a { b "1" }\nc 2\n')
        assert result.exit_code == 0, result.output
        records = [json.loads(line) for line in result.output.splitlines()]
        assert records == [
            {"key_path": ["a", "b"], "value": "1"},
            {"key_path": ["c"], "value": "2"},
        ]

    def test_compact_output(self):
        result = run("--indent", "0", "-", input="a b")
        assert result.exit_code == 0, result.output
        assert result.output == '{"a": "b"}\n'

    def test_disable_escape(self):
        result = run("--indent", "0", "--disable-escape", "-", input='"a\\q" b')
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"a\\q": "b"}

    def test_escape_policy_passthrough(self):
        result = run("--escape-policy", "passthrough", "-", input='"a\\q" b')
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"a\\q": "b"}

    def test_allow_incomplete(self):
        result = run("--allow-incomplete", "-", input="a { b c")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"a": {"b": "c"}}

    def test_malformed_input_exits_with_error(self):
        result = run("-", input="key {}}")
        assert result.exit_code == 1
        assert "Too many closing brackets." in result.output
        assert "line 1, column 7" in result.output

    def test_missing_file(self, tmp_path):
        result = run(str(tmp_path / "missing.vdf"))
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_config_file(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("aggregator:\n  use_latest_value: true\noutput:\n  indent: 0\n", encoding="utf-8")

        result = run("--config", str(config_file), "-", input="k 1 k 2")
        assert result.exit_code == 0, result.output
        assert result.output == '{"k": "2"}\n'

    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("VDF_USE_LATEST_VALUE", "true")
        result = run("--indent", "0", "-", input="k 1 k 2")
        assert result.output == '{"k": "2"}\n'
