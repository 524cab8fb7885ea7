"""
Unit tests for command-line parsing and dispatch.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from yawning.cli.main import (
    build_parser,
    build_worker_args,
    main_cli,
    resolve_app_config,
    resolve_scheduler_config,
)
from yawning.models.config import AppConfig, SchedulerConfig, SelectionMode
from yawning.system.affinity import DryRunHinter


def resolve(argv, base=None):
    args = build_parser().parse_args(argv)
    return resolve_scheduler_config(args, base or SchedulerConfig())


@pytest.mark.unit
class TestArgumentParsing:
    """Test cases for the argument parser and option resolution."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.command == "start"
        config = resolve_scheduler_config(args, SchedulerConfig())
        assert config == SchedulerConfig()

    def test_original_flag_set(self):
        config = resolve(["start", "-g", "-f", "-B", "-b", "70", "-c", "200"])
        assert config.selection_mode is SelectionMode.GLOBAL
        assert config.track_foreground is True
        assert config.balance_mode is True
        assert config.per_process_threshold == 70.0
        assert config.total_load_threshold == 200.0

    @pytest.mark.parametrize(
        "argv",
        [
            ["-g", "-p", "Chrome"],
            ["-p", "Chrome", "-g"],
        ],
    )
    def test_pattern_disables_global_in_any_order(self, argv):
        config = resolve(argv)
        assert config.selection_mode is SelectionMode.BY_NAME
        assert config.name_patterns == ("Chrome",)

    def test_repeated_patterns(self):
        config = resolve(["-p", "Google Chrome", "-p", "Slack"])
        assert config.name_patterns == ("Google Chrome", "Slack")

    def test_negative_switches(self):
        config = resolve(["--no-foreground", "--no-balance", "--dry-run"])
        assert config.track_foreground is False
        assert config.balance_mode is False
        assert config.dry_run is True

    def test_command_line_overrides_file(self):
        base = SchedulerConfig(per_process_threshold=95, balance_mode=False)
        config = resolve(["-B"], base)
        assert config.balance_mode is True
        assert config.per_process_threshold == 95

    def test_conflicting_switches_exit_with_one(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["-f", "--no-foreground"])
        assert exc_info.value.code == 1

    def test_unknown_command_exits_with_one(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["restart"])
        assert exc_info.value.code == 1

    def test_daemon_options(self):
        args = build_parser().parse_args(["--pid-file", "/tmp/y.pid", "--log-level", "debug"])
        config = resolve_app_config(args, AppConfig())
        assert config.daemon.pid_file == Path("/tmp/y.pid")
        assert config.daemon.log_level == "DEBUG"

    def test_no_daemon_options_returns_base(self):
        base = AppConfig()
        assert resolve_app_config(build_parser().parse_args([]), base) is base


@pytest.mark.unit
class TestWorkerArguments:
    """Test cases for forwarding options to the detached worker."""

    def test_forwarded_options_resolve_identically(self, config_file):
        from yawning.config import set_config_path

        set_config_path(config_file)
        argv = ["start", "-p", "Google Chrome", "-B", "-b", "70", "--no-foreground", "--dry-run"]
        args = build_parser().parse_args(argv)

        worker_args = build_worker_args(args)
        worker = build_parser().parse_args(["run", *worker_args])

        assert worker.command == "run"
        assert worker.config == config_file.resolve()
        assert resolve_scheduler_config(worker, SchedulerConfig()) == resolve_scheduler_config(
            args, SchedulerConfig()
        )

    def test_pid_file_forwarded(self):
        args = build_parser().parse_args(["--pid-file", "/tmp/other.pid"])
        assert f"--pid-file={Path('/tmp/other.pid').resolve()}" in build_worker_args(args)


@pytest.mark.unit
class TestMainCli:
    """Test cases for command dispatch."""

    def test_help(self, capsys):
        assert main_cli(["help"]) == 0
        output = capsys.readouterr().out
        assert "start" in output
        assert "-p" in output

    def test_invalid_threshold_exits_before_scanning(self, config_file):
        with patch("yawning.cli.main.run_worker") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main_cli(["run", "--config", str(config_file), "-b", "abc"])
        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_invalid_config_file_exits(self, temp_dir):
        bad = temp_dir / "config.toml"
        bad.write_text("[scheduler]\nper_process_threshold = 'high'\n")
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["start", "--config", str(bad)])
        assert exc_info.value.code == 1

    def test_stop(self, config_file):
        with patch("yawning.cli.main.stop_daemon", return_value=0) as mock_stop:
            assert main_cli(["stop", "--config", str(config_file)]) == 0
        mock_stop.assert_called_once()

    def test_run_uses_resolved_config(self, config_file):
        with patch("yawning.cli.main.run_worker", return_value=0) as mock_run:
            code = main_cli(["run", "--config", str(config_file), "--dry-run", "-p", "Slack"])

        assert code == 0
        app_config, scheduler_config, hinter = mock_run.call_args[0]
        assert scheduler_config.selection_mode is SelectionMode.BY_NAME
        assert isinstance(hinter, DryRunHinter)
        assert str(app_config.daemon.pid_file) == "/tmp/yawning-test.pid"

    def test_start_spawns_worker(self, config_file):
        with patch("yawning.cli.main.start_daemon", return_value=0) as mock_start:
            assert main_cli(["--config", str(config_file), "--dry-run"]) == 0

        _, worker_args = mock_start.call_args[0]
        assert "--dry-run" in worker_args
        assert f"--config={config_file.resolve()}" in worker_args
