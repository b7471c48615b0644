import os

import pytest

from noteify.noteify import (
    DEFAULT_KEYS,
    Config,
    NoteifyShell,
    StartupError,
    main,
)


def _write_config(tmp_path, text):
    path = tmp_path / "config"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_default_config_is_created(tmp_path):
    """A missing config file is written with defaults."""
    config_file = str(tmp_path / "conf" / "noteify" / "config")
    config = Config(config_file)
    assert os.path.isfile(config_file)
    assert config.vault_dir == os.path.expanduser("~/.noteify")
    assert config.escape_quits is False
    assert config.time_format == "%Y-%m-%d %H:%M:%S"
    assert config.keys == DEFAULT_KEYS
    assert config.log_file is None


def test_custom_config(tmp_path):
    vault = tmp_path / "notes"
    config = Config(_write_config(tmp_path, (
        "[main]\n"
        f"vault_dir = {vault}\n"
        "escape_quits = yes\n"
        "[colors]\n"
        "title = not-a-color\n"
        "[keys]\n"
        "new = ctrl+t\n")))
    assert config.vault_dir == str(vault)
    assert config.escape_quits is True
    assert config.keys["new"] == "ctrl+t"
    assert config.keys["save"] == "ctrl+s"
    # invalid colors fall back to the default
    assert config.styles["title"].color.name == "yellow"


def test_disable_colors(tmp_path):
    config = Config(_write_config(
        tmp_path, "[colors]\ndisable_colors = true\n"))
    assert set(config.colors.values()) == {"default"}


def test_invalid_boolean_is_fatal(tmp_path):
    with pytest.raises(StartupError):
        Config(_write_config(tmp_path, "[main]\nescape_quits = maybe\n"))


def test_malformed_config_is_fatal(tmp_path):
    with pytest.raises(StartupError):
        Config(_write_config(tmp_path, "no section header\n"))


def test_main_new_and_list(tmp_path, capsys):
    vault = tmp_path / "vault"
    config_file = _write_config(tmp_path, f"[main]\nvault_dir = {vault}\n")
    main(["-c", config_file, "new", "todo", "--content", "buy milk"])
    assert (vault / "todo.md").read_text(encoding="utf-8") == "buy milk"
    main(["-c", config_file, "list"])
    output = capsys.readouterr().out
    assert "Added note: todo" in output
    assert "todo" in output
    assert "Modified:" in output


def test_main_existing_note_exits(tmp_path, capsys):
    vault = tmp_path / "vault"
    config_file = _write_config(tmp_path, f"[main]\nvault_dir = {vault}\n")
    main(["-c", config_file, "new", "todo"])
    with pytest.raises(SystemExit) as excinfo:
        main(["-c", config_file, "new", "todo"])
    assert excinfo.value.code == 1
    assert "already exists" in capsys.readouterr().err


def test_main_uncreatable_vault_exits(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    config_file = _write_config(
        tmp_path, f"[main]\nvault_dir = {blocker / 'vault'}\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["-c", config_file, "list"])
    assert excinfo.value.code == 1


def test_main_version(capsys):
    main(["version"])
    assert "noteify 0.1.0" in capsys.readouterr().out


def test_unreadable_config_is_fatal(tmp_path):
    """A config path that can't be read is not silently ignored."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    with pytest.raises(StartupError):
        Config(str(config_dir))


def test_main_unreadable_config_exits(tmp_path, capsys):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    with pytest.raises(SystemExit) as excinfo:
        main(["-c", str(config_dir), "list"])
    assert excinfo.value.code == 1
    assert "error reading config file" in capsys.readouterr().err


def test_main_shell_interrupt_exits(tmp_path, capsys, monkeypatch):
    """Ctrl+C in the shell exits with status 1 and stops the watcher."""
    vault = tmp_path / "vault"
    config_file = _write_config(tmp_path, f"[main]\nvault_dir = {vault}\n")
    stopped = []

    def interrupted(self, intro=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(NoteifyShell, "cmdloop", interrupted)
    monkeypatch.setattr(
        NoteifyShell, "postloop", lambda self: stopped.append(True))
    with pytest.raises(SystemExit) as excinfo:
        main(["-c", config_file, "shell"])
    assert excinfo.value.code == 1
    assert stopped == [True]
    assert "Interrupted." in capsys.readouterr().out
