import pytest

from config.entry_loader import load_entries, save_entries
from core.exceptions import ConfigLoadError
from models.game_entry import GameEntry


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_missing_file_means_no_entries(tmp_path):
    assert load_entries(str(tmp_path / "games.yaml")) == []


@pytest.mark.parametrize("text", ["", "\n", "entries:\n", "entries: []\n"])
def test_empty_file_means_no_entries(tmp_path, text):
    assert load_entries(write(tmp_path / "games.yaml", text)) == []


def test_entries_keep_file_order(tmp_path):
    path = write(
        tmp_path / "games.yaml",
        """
entries:
  - name: Factorio
    executable: factorio
    start_commands:
      - notify-send "GL HF"
      - openrgb --profile gaming
    end_commands:
      - openrgb --profile idle
  - game_name: Witcher 3
    executable: witcher3.exe
""",
    )

    entries = load_entries(path)

    assert [entry.name for entry in entries] == ["Factorio", "Witcher 3"]
    assert entries[0].start_commands == ['notify-send "GL HF"', "openrgb --profile gaming"]
    assert entries[0].end_commands == ["openrgb --profile idle"]
    assert entries[1].start_commands == []
    assert entries[1].key == "witcher3.exe"


def test_top_level_list_is_accepted(tmp_path):
    path = write(tmp_path / "games.yaml", "- executable: game.bin\n  start_commands: echo hi\n")

    entries = load_entries(path)

    assert entries == [GameEntry("game.bin", "game.bin", ["echo hi"], [])]


def test_duplicate_executables_keep_first_entry(tmp_path):
    path = write(
        tmp_path / "games.yaml",
        """
entries:
  - {name: First, executable: shared.bin, start_commands: [one]}
  - {name: Second, executable: SHARED.BIN, start_commands: [two]}
  - {name: Other, executable: other.bin}
""",
    )

    entries = load_entries(path)

    assert [entry.name for entry in entries] == ["First", "Other"]


def test_invalid_entries_are_skipped(tmp_path):
    path = write(
        tmp_path / "games.yaml",
        """
entries:
  - {name: No executable}
  - {name: Blank, executable: "  "}
  - {name: Bad commands, executable: bad.bin, start_commands: {a: b}}
  - just a string
  - {name: Good, executable: good.bin}
""",
    )

    assert [entry.name for entry in load_entries(path)] == ["Good"]


def test_malformed_yaml_raises(tmp_path):
    path = write(tmp_path / "games.yaml", "entries: [\n  - name: oops\n")

    with pytest.raises(ConfigLoadError) as excinfo:
        load_entries(path)
    assert excinfo.value.path == path


def test_entries_must_be_a_list(tmp_path):
    path = write(tmp_path / "games.yaml", "entries:\n  name: nope\n")

    with pytest.raises(ConfigLoadError):
        load_entries(path)


def test_save_then_load(tmp_path):
    path = str(tmp_path / "games.yaml")
    entries = [
        GameEntry("Factorio", "factorio", ["echo start"], ["echo end"]),
        GameEntry("Celeste", "Celeste.bin.x86_64"),
    ]

    save_entries(path, entries)

    assert load_entries(path) == entries
