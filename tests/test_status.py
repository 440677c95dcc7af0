from conftest import wait_for
from config.config_manager import ConfigManager
from models.game_entry import GameEntry
from ui.status import get_status_info


def test_status_without_watchdog():
    assert get_status_info(None) == "程序未启动"


def test_status_lists_running_games(watchdog, loader, scanner, runner):
    loader.entries = [GameEntry("Factorio", "factorio"), GameEntry("Celeste", "celeste")]
    scanner.running.add("factorio")
    watchdog.poll_once()
    assert wait_for(lambda: "factorio" in watchdog.active_monitors)

    status = get_status_info(watchdog)

    assert "Running: Factorio" in status
    assert "Celeste" not in status
    assert "Configured games: 2" in status


def test_status_includes_settings(watchdog, tmp_path):
    manager = ConfigManager(config_dir=str(tmp_path))

    status = get_status_info(watchdog, manager)

    assert "No monitored game running" in status
    assert "Poll interval: 5s (exact match)" in status
    assert str(tmp_path) in status


def test_status_reports_fatal_error(watchdog, loader):
    loader.error = "unreadable"
    watchdog.start()
    assert wait_for(lambda: not watchdog.is_alive())

    status = get_status_info(watchdog)

    assert "Watchdog stopped" in status
    assert "unreadable" in status
