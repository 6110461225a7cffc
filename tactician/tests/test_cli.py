"""
Tests for the command-line interface.
"""

import pytest

from ..cli import _parse_command, main
from ..games import GameKind
from ..games.strategy import Map, loads


def feed(monkeypatch, *lines):
    """Answer input() prompts with the given lines, then end of input."""
    answers = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


class TestMapCommands:
    """Tests for map validate/default."""

    def test_default_to_stdout(self, capsys):
        assert main(["map", "default", "--width", "6", "--height", "5"]) == 0
        assert loads(capsys.readouterr().out) == Map.default(6, 5)

    def test_default_to_file(self, tmp_path):
        target = tmp_path / "default.map"

        assert main(["map", "default", "-o", str(target)]) == 0
        assert loads(target.read_text()) == Map.default(5, 5)

    def test_validate(self, tmp_path, capsys):
        target = tmp_path / "ok.map"
        target.write_text("3,3\n1,1\n{\n(4,0,2)\n(5,1,2)\n}\n")

        assert main(["map", "validate", str(target)]) == 0
        out = capsys.readouterr().out
        assert "Valid: 3x3, 1 MP, 1 AP" in out
        assert "Team 1: 1 unit(s)" in out

    def test_validate_reports_bad_line(self, tmp_path, capsys):
        target = tmp_path / "bad.map"
        target.write_text("3,3\n1\n{\n}\n")

        assert main(["map", "validate", str(target)]) == 1
        assert "line 2" in capsys.readouterr().err

    def test_validate_missing_file(self, tmp_path):
        assert main(["map", "validate", str(tmp_path / "nope.map")]) == 1


class TestPlayCommands:
    """Tests for playing from the terminal."""

    def test_ai_tictactoe_plays_to_the_end(self, capsys):
        assert main(["tictactoe", "--x", "tictactoe", "--o", "random", "--seed", "5"]) == 0

        out = capsys.readouterr().out
        assert "1> X (tictactoe): Place" in out
        assert "Tie game" in out or "wins" in out

    def test_human_moves_then_quits(self, monkeypatch, capsys):
        feed(monkeypatch, "bogus", "1 1", "quit")

        assert main(["tictactoe"]) == 0

        out = capsys.readouterr().out
        assert "Error: A location is two numbers: X Y" in out
        assert "1> X (human): Place (1, 1)" in out
        assert "2> O (tictactoe): Place" in out

    def test_strategy_turn_limit(self, capsys):
        assert main(["strategy", "--team0", "idle", "--team1", "idle", "--turns", "4"]) == 0

        out = capsys.readouterr().out
        assert "Warning: Stopped after 4 decision(s)" in out
        assert "4> 1 (idle): End turn" in out

    def test_strategy_bad_map(self, tmp_path, capsys):
        target = tmp_path / "bad.map"
        target.write_text("nonsense")

        assert main(["strategy", "--map", str(target)]) == 1
        assert "invalid map" in capsys.readouterr().err

    def test_unknown_log_level(self):
        with pytest.raises(SystemExit):
            main(["--log-level", "LOUD", "map", "default"])

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestParseCommand:
    """Tests for typed commands."""

    def test_strategy_commands(self):
        assert _parse_command(GameKind.STRATEGY, "end") == {"tag": "end_turn"}
        assert _parse_command(GameKind.STRATEGY, "move 2 3") == {
            "tag": "move_unit",
            "location": [2, 3],
        }

    def test_tictactoe_location(self):
        assert _parse_command(GameKind.TICTACTOE, "0 2") == {"location": [0, 2]}

    @pytest.mark.parametrize("line", ["", "fly 1 1", "move 1"])
    def test_rejected(self, line):
        with pytest.raises(ValueError):
            _parse_command(GameKind.STRATEGY, line)
