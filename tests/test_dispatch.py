import io

import pytest
from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from noteify.noteify import (
    Action,
    ActionDispatcher,
    FSHandler,
    KeyEvent,
    ListEntry,
    Mode,
    NoteList,
    NoteifyShell,
    TextArea,
    TextInput,
    chars,
)


@pytest.mark.parametrize("key,action", [
    ("ctrl+n", Action.REQUEST_NEW),
    ("ctrl+l", Action.REQUEST_LIST),
    ("ctrl+s", Action.SAVE),
    ("ctrl+q", Action.QUIT),
    ("ctrl+c", Action.QUIT),
    ("esc", Action.CANCEL),
    ("enter", Action.ACCEPT),
    ("backspace", Action.INPUT),
    ("down", Action.INPUT),
])
def test_default_bindings(key, action):
    assert ActionDispatcher().dispatch(KeyEvent(key)) is action


def test_typed_characters_are_input():
    """Typed text is never a binding, even if it spells a key name."""
    assert ActionDispatcher().dispatch(chars("esc")) is Action.INPUT


def test_custom_bindings():
    """Bindings come from the [keys] config values."""
    dispatcher = ActionDispatcher({"new": "ctrl+t, F2", "save": "ctrl+w"})
    assert dispatcher.dispatch(KeyEvent("ctrl+t")) is Action.REQUEST_NEW
    assert dispatcher.dispatch(KeyEvent("f2")) is Action.REQUEST_NEW
    assert dispatcher.dispatch(KeyEvent("ctrl+w")) is Action.SAVE
    assert dispatcher.dispatch(KeyEvent("ctrl+n")) is Action.INPUT
    # unset actions keep their defaults
    assert dispatcher.dispatch(KeyEvent("esc")) is Action.CANCEL


def test_text_input_is_single_line_and_limited():
    widget = TextInput(char_limit=5)
    widget.handle(chars("ab\ncdefg"))
    assert widget.value() == "abcde"
    widget.handle(KeyEvent("backspace"))
    assert widget.value() == "abcd"
    widget.handle(KeyEvent("ctrl+u"))
    assert widget.value() == ""


def test_text_input_render_placeholder():
    widget = TextInput(placeholder="name it", prompt="> ")
    assert widget.render().plain == "> name it"
    widget.set_value("todo")
    assert widget.render().plain == "> todo"


def test_text_area_edits():
    widget = TextArea()
    widget.handle(chars("one"))
    widget.handle(KeyEvent("enter"))
    widget.handle(chars("twoo"))
    widget.handle(KeyEvent("backspace"))
    assert widget.value() == "one\ntwo"


def test_note_list_navigation_stays_in_range():
    widget = NoteList(page_size=2)
    widget.set_items([ListEntry(str(x), "") for x in range(5)])
    widget.handle(KeyEvent("up"))
    assert widget.value() == "0"
    widget.handle(KeyEvent("pgdown"))
    assert widget.value() == "2"
    widget.handle(KeyEvent("end"))
    widget.handle(KeyEvent("down"))
    assert widget.value() == "4"
    widget.set_items([ListEntry("only", "")])
    assert widget.value() == "only"
    widget.set_value("missing")
    assert widget.value() == "only"


def test_note_list_empty():
    widget = NoteList()
    widget.set_items([])
    widget.handle(KeyEvent("down"))
    assert widget.selected() is None
    assert "No notes." in widget.render().plain


@pytest.fixture
def shell(machine):
    return NoteifyShell(
        machine, ActionDispatcher(), watch=False, stdout=io.StringIO())


def test_shell_creates_and_saves_note(shell, store):
    """Plain lines are typed and entered; ':' lines are keys."""
    shell.onecmd(":new")
    shell.onecmd("todo")
    assert shell.machine.mode is Mode.EDITING
    shell.onecmd("buy milk")
    shell.onecmd("")
    shell.onecmd("eggs")
    assert shell.onecmd(":save") is False
    assert store.read("todo") == "buy milk\n\neggs\n"


def test_shell_raw_keys(shell, store):
    """':key' and unknown ':' words are sent as key names."""
    shell.onecmd(":key ctrl+n")
    shell.onecmd("raw")
    shell.onecmd(":ctrl+s")
    assert shell.machine.mode is Mode.IDLE
    assert store.exists("raw")


def test_shell_list_and_open(shell, store):
    store.overwrite(store.create("a"), "alpha")
    shell.onecmd(":list")
    assert shell.machine.mode is Mode.LISTING
    shell.onecmd(":open")
    assert shell.machine.text_area.value() == "alpha"
    shell.onecmd(":esc")
    assert shell.machine.mode is Mode.IDLE


def test_shell_quit_stops_loop(shell):
    assert shell.onecmd(":quit") is True
    assert shell.machine.done


def test_shell_exit_alias(shell):
    assert shell.onecmd(":exit") is True


def test_shell_unknown_command_reports(shell):
    assert shell.onecmd(":no such thing") is False
    assert "no such command" in shell.machine.view_model().status


def test_shell_render_shows_view(shell):
    shell.onecmd(":new")
    shell.render()
    output = shell.stdout.getvalue()
    assert "Welcome to Noteify!" in output
    assert "What would you like to call it?" in output
    assert ":save" in output


def test_shell_prompt_follows_mode(shell):
    shell.onecmd(":list")
    shell.postcmd(False, ":list")
    assert "list" in shell.prompt


@pytest.mark.parametrize("event", [
    FileCreatedEvent("/vault/new.md"),
    FileModifiedEvent("/vault/new.md"),
    FileDeletedEvent("/vault/new.md"),
    FileMovedEvent("/vault/a.md", "/vault/b.md"),
])
def test_vault_changes_mark_list_stale(event):
    """Watched vault events invalidate the note list."""
    widget = NoteList()
    widget.set_items([])
    assert not widget.stale
    FSHandler(widget).on_any_event(event)
    assert widget.stale
