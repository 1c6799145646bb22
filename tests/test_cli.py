"""
Tests for the command line entry point.
"""

import json

from abacus_trainer.cli import build_parser, config_from_args, main


class TestConfigFromArgs:
    """Tests for config_from_args."""

    def test_config_when_flags_then_override_defaults(self):
        """Flags become RuleConfig fields."""
        args = build_parser().parse_args(["--digits", "3", "1", "--min-steps", "3", "--max-steps", "4"])
        config = config_from_args(args)
        assert config.selected_digits == (1, 3)
        assert (config.min_steps, config.max_steps) == (3, 4)

    def test_config_when_bridging_target_then_uses_factory(self):
        """--rule bridging --target 7 uses the bridging defaults."""
        args = build_parser().parse_args(["--rule", "bridging", "--target", "7"])
        config = config_from_args(args)
        assert config.target_number == 7
        assert config.selected_digits == (2, 5, 7)

    def test_config_when_file_and_flags_then_flags_win(self, tmp_path):
        """Flags are applied over the config file."""
        path = tmp_path / "rule.json"
        path.write_text(json.dumps({"min_steps": 2, "max_steps": 3}), encoding="utf-8")
        args = build_parser().parse_args(["--config", str(path), "--max-steps", "5"])
        assert config_from_args(args).max_steps == 5


class TestMain:
    """Tests for main."""

    def test_main_when_defaults_then_prints_numbered_lines(self, capsys):
        """Text output has one numbered line per example."""
        # Act
        code = main(["--count", "3", "--seed", "1"])

        # Assert
        lines = capsys.readouterr().out.strip().splitlines()
        assert code == 0
        assert len(lines) == 3
        assert lines[0].startswith("  1. ")
        assert " = " in lines[0]

    def test_main_when_json_then_prints_session(self, capsys):
        """--json prints the serialised session."""
        code = main(["--json", "--count", "2", "--seed", "3"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert len(data["examples"]) == 2
        assert data["metadata"]["rule_kind"] == "simple"

    def test_main_when_bridging_without_target_then_fails(self):
        """Bridging needs a target."""
        assert main(["--rule", "bridging"]) == 1

    def test_main_when_config_file_has_target_then_succeeds(self, tmp_path, capsys):
        """The target may come from the config file."""
        path = tmp_path / "bridging.json"
        path.write_text(json.dumps({"target_number": 8}), encoding="utf-8")

        code = main(["--rule", "bridging", "--config", str(path), "--json", "--seed", "2"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["metadata"]["rule"] == "Bridging 8"

    def test_main_when_config_file_invalid_then_fails(self, tmp_path):
        """Invalid config files give exit code 1."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"selected_digits": [0]}), encoding="utf-8")
        assert main(["--config", str(path)]) == 1

    def test_main_when_number_strategy_single_digit_then_warns(self, capsys):
        """Warnings are written to stderr."""
        code = main(["--strategy", "number", "--count", "2", "--seed", "4"])

        captured = capsys.readouterr()
        assert code == 0
        assert "warning:" in captured.err
