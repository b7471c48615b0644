"""Shared test fixtures."""
import pytest

from noteify.noteify import (
    Action,
    KeyEvent,
    SessionStateMachine,
    VaultStore,
    chars,
)

KEYS = {
    Action.REQUEST_NEW: "ctrl+n",
    Action.REQUEST_LIST: "ctrl+l",
    Action.ACCEPT: "enter",
    Action.SAVE: "ctrl+s",
    Action.CANCEL: "esc",
    Action.QUIT: "ctrl+q",
}


@pytest.fixture
def vault_dir(tmp_path):
    """Path of a vault that doesn't exist yet."""
    return str(tmp_path / "vault")


@pytest.fixture
def store(vault_dir):
    """A VaultStore with its directory created."""
    store = VaultStore(vault_dir)
    store.ensure_vault()
    return store


@pytest.fixture
def machine(store):
    """A SessionStateMachine in idle mode over an empty vault."""
    return SessionStateMachine(store)


@pytest.fixture
def type_text():
    """Send typed characters to a state machine."""
    def _type(machine, text):
        return machine.handle(Action.INPUT, chars(text))
    return _type


@pytest.fixture
def press():
    """Send an action with its default key event to a state machine."""
    def _press(machine, action):
        return machine.handle(action, KeyEvent(KEYS[action]))
    return _press
