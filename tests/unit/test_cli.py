"""Unit tests for the command line interface."""

from unittest.mock import patch

import pytest

from fasting_app.cli import build_parser, format_status, main
from fasting_app.data.plans import lookup
from fasting_app.models.metrics import ProgressSnapshot, StatsSnapshot

HOUR_MS = 3_600_000


@pytest.fixture
def run_cli(tmp_path, capsys):
    base = ["--config-dir", str(tmp_path), "--db-path", str(tmp_path / "cli.db")]

    def _run(*args: str) -> tuple[int, str]:
        with patch("fasting_app.delivery.notifications.shutil.which", return_value=None):
            code = main(base + list(args))
        return code, capsys.readouterr().out
    return _run


class TestFormatStatus:
    """Test the status tiles."""

    def test_idle(self):
        progress = ProgressSnapshot(now=0, active=False, elapsed_ms=0, remaining_ms=0,
                                    target_ms=16 * HOUR_MS, goal_reached=False)
        stats = StatsSnapshot(now=0, streak_days=0, average_ms=0.0, total_fasts=0)

        lines = format_status(progress, stats, lookup("16:8"))

        assert lines[1] == "Elapsed  00:00:00  (—)"
        assert lines[2] == "Target   16h  (00:00:00 left)"
        assert lines[3] == "Streak   0 days  (Avg 0 h)"

    def test_goal_reached(self):
        progress = ProgressSnapshot(now=0, active=True, elapsed_ms=17 * HOUR_MS, remaining_ms=0,
                                    target_ms=16 * HOUR_MS, goal_reached=True, start_time=0)
        stats = StatsSnapshot(now=0, streak_days=3, average_ms=15.5 * HOUR_MS, total_fasts=3)

        lines = format_status(progress, stats, lookup("16:8"))

        assert lines[1].startswith("Elapsed  17:00:00")
        assert lines[2] == "Target   16h  (Goal reached!)"
        assert lines[3] == "Streak   3 days  (Avg 15.5 h)"


class TestParser:
    def test_plan_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["plan", "5:2"])

    def test_repeat_index_is_int(self):
        args = build_parser().parse_args(["repeat", "2"])
        assert args.index == 2


class TestCommands:
    """Test commands end to end against a temporary database."""

    def test_no_command(self, run_cli):
        code, _ = run_cli()
        assert code == 1

    def test_status_idle(self, run_cli):
        code, out = run_cli("status")
        assert code == 0
        assert "Plan     16:8 – 16h fast / 8h eat" in out
        assert "Elapsed  00:00:00" in out

    def test_start_and_end(self, run_cli):
        code, out = run_cli("start")
        assert code == 0
        assert "• Fast started." in out

        code, out = run_cli("end")
        assert code == 0
        assert "✓ Fast saved to history." in out

        code, out = run_cli("end")
        assert "No fast is running." in out

        _, out = run_cli("history")
        assert out.startswith("[0] ")
        assert "0h 0m" in out

    def test_plans_marks_selection(self, run_cli):
        run_cli("plan", "OMAD")
        _, out = run_cli("plans")
        assert "* OMAD – 23h fast / 1h eat" in out
        assert "  16:8 – 16h fast / 8h eat" in out

    def test_plan(self, run_cli):
        code, out = run_cli("plan", "18:6")
        assert code == 0
        assert "Plan: 18:6 – 18h fast / 6h eat" in out

    def test_start_at(self, run_cli):
        code, out = run_cli("start-at", "2024-01-01", "08:00")
        assert code == 0
        assert "Fast started." in out

    def test_start_at_invalid(self, run_cli):
        code, out = run_cli("start-at", "garbage")
        assert code == 1
        assert "✗ Could not parse date/time." in out

    def test_history_empty(self, run_cli):
        _, out = run_cli("history")
        assert "No fasts yet" in out

    def test_repeat(self, run_cli):
        run_cli("start-at", "2024-01-01T00:00:00Z")
        run_cli("end")

        code, out = run_cli("repeat", "0")

        assert code == 0
        assert "Fast started." in out

    def test_repeat_missing(self, run_cli):
        code, out = run_cli("repeat", "5")
        assert code == 1
        assert "No history entry at index 5" in out

    def test_reset(self, run_cli):
        run_cli("start")
        code, _ = run_cli("reset")
        assert code == 0
        _, out = run_cli("status")
        assert "Elapsed  00:00:00  (—)" in out

    def test_clear(self, run_cli):
        run_cli("start")
        run_cli("end")

        code, out = run_cli("clear", "--yes")

        assert code == 0
        assert "History cleared." in out
        _, out = run_cli("history")
        assert "No fasts yet" in out

    def test_clear_cancelled(self, run_cli):
        with patch("builtins.input", return_value="n"):
            _, out = run_cli("clear")
        assert "Cancelled." in out

    def test_export(self, run_cli, tmp_path):
        code, out = run_cli("export", "--dir", str(tmp_path / "out"))
        assert code == 0
        assert "Exported 0 fasts" in out
        assert len(list((tmp_path / "out").glob("fasting_history_*.csv"))) == 1

    def test_notify_unsupported(self, run_cli):
        code, out = run_cli("notify", "on")
        assert code == 0
        assert "✗ Notifications not supported on this system." in out
        assert "Notifications: off" in out

    def test_notify_off(self, run_cli):
        _, out = run_cli("notify", "off")
        assert "Notifications: off" in out

    def test_watch(self, run_cli):
        run_cli("start")
        code, out = run_cli("watch", "--seconds", "0.05")
        assert code == 0

    def test_invalid_config(self, tmp_path, capsys):
        (tmp_path / "tracker.yaml").write_text("history:\n  max_entries: 0\n")

        code = main(["--config-dir", str(tmp_path), "status"])

        assert code == 2
        assert "max_entries" in capsys.readouterr().out

    def test_unparsable_config_file(self, tmp_path, capsys):
        (tmp_path / "tracker.yaml").write_text("session: [unclosed\n")

        code = main(["--config-dir", str(tmp_path), "status"])

        assert code == 2
        assert capsys.readouterr().out.startswith("Error: ")

    def test_config_file_without_sections(self, tmp_path, capsys):
        (tmp_path / "tracker.yaml").write_text("- just\n- a list\n")

        code = main(["--config-dir", str(tmp_path), "status"])

        assert code == 2
        assert "mapping of sections" in capsys.readouterr().out
