#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""noteify
Version:  0.1.0
License:  MIT
About:
A terminal-based note-taking tool with local file-based storage.

usage: noteify [-h] [-c <file>] [-d] {shell,list,new,version} ...

Notes are plain markdown files kept in a single vault directory
(~/.noteify by default).

commands:
  (for more help: noteify <command> -h)
    list (ls)           list notes
    new                 create a new note
    shell               interactive shell (default)
    version             show version info

optional arguments:
  -h, --help            show this help message and exit
  -c <file>, --config <file>
                        config file
  -d, --debug           enable debug logging

Copyright © 2026 noteify contributors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

"""
import argparse
import configparser
import enum
import logging
import os
import sys
from cmd import Cmd
from collections import namedtuple
from datetime import datetime

import tzlocal
from rich import box
from rich.color import ColorParseError
from rich.console import Console, Group
from rich.style import Style
from rich.table import Table
from rich.text import Text
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

APP_NAME = "noteify"
APP_VERS = "0.1.0"
APP_COPYRIGHT = "Copyright © 2026 noteify contributors."
APP_LICENSE = "Released under MIT license."
DEFAULT_VAULT_DIR = f"~/.{APP_NAME}"
DEFAULT_CONFIG_FILE = f"$HOME/.config/{APP_NAME}/config"
NOTE_EXT = "md"
NAME_CHAR_LIMIT = 156
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_KEYS = {
    "new": "ctrl+n",
    "list": "ctrl+l",
    "save": "ctrl+s",
    "quit": "ctrl+q,ctrl+c",
    "cancel": "esc",
    "accept": "enter",
}
DEFAULT_COLORS = {
    "header": "bright_magenta",
    "help": "bright_cyan",
    "title": "yellow",
    "description": "bright_black",
    "cursor": "bright_magenta",
    "status": "red",
}
DEFAULT_CONFIG = (
    "[main]\n"
    f"vault_dir = {DEFAULT_VAULT_DIR}\n"
    "# when true, 'esc' with nothing open quits the program\n"
    "escape_quits = false\n"
    "# strftime format for modification times in the note list\n"
    "time_format = %%Y-%%m-%%d %%H:%%M:%%S\n"
    "# write log records to this file\n"
    "#log_file =\n"
    "\n"
    "[colors]\n"
    "disable_colors = false\n"
    "# custom colors\n"
    "#header = bright_magenta\n"
    "#help = bright_cyan\n"
    "#title = yellow\n"
    "#description = bright_black\n"
    "#cursor = bright_magenta\n"
    "#status = red\n"
    "\n"
    "[keys]\n"
    "# comma-separated key names for each action\n"
    "#new = ctrl+n\n"
    "#list = ctrl+l\n"
    "#save = ctrl+s\n"
    "#quit = ctrl+q,ctrl+c\n"
    "#cancel = esc\n"
    "#accept = enter\n"
)
HELP_TEXT = (
    ":new new note | :list list | :save save | "
    ":quit quit | :esc back/save"
)

logger = logging.getLogger(__name__)


class NoteifyError(Exception):
    """Base class for all noteify errors."""


class StartupError(NoteifyError):
    """The configuration or vault cannot be prepared. Fatal."""


class InvalidName(NoteifyError):
    """A note name that cannot be used as a filename."""


class VaultIOError(NoteifyError):
    """A filesystem operation on the vault failed."""


class AlreadyExists(VaultIOError):
    """A note with the requested name is already in the vault."""


class WriteError(VaultIOError):
    """Saving a note failed part way through.

    Attributes:
        step (str): the step that failed (truncate, seek, write, flush
    or close).
        path (str): the note file.

    """
    def __init__(self, step, path, error=None):
        """Initializes a WriteError() object."""
        self.step = step
        self.path = path
        msg = f"unable to {step} {path}"
        if error is not None:
            msg += f" ({getattr(error, 'strerror', None) or error})"
        super().__init__(msg)


NoteSummary = namedtuple("NoteSummary", ["name", "modified"])
ListEntry = namedtuple("ListEntry", ["title", "description"])
KeyEvent = namedtuple("KeyEvent", ["key", "text"], defaults=[""])
ViewModel = namedtuple(
    "ViewModel", ["mode", "title", "body", "status", "is_error"])


def chars(text):
    """Build a KeyEvent for typed characters.

    Args:
        text (str): the typed text.

    Returns:
        event (KeyEvent): a 'chars' event.

    """
    return KeyEvent("chars", text)


class Mode(enum.Enum):
    """Interaction modes. Exactly one is current at any time."""
    IDLE = "idle"
    NAMING = "naming"
    EDITING = "editing"
    LISTING = "listing"
    QUIT = "quit"


class Action(enum.Enum):
    """Abstract user actions, independent of key bindings."""
    REQUEST_NEW = "new"
    REQUEST_LIST = "list"
    ACCEPT = "accept"
    SAVE = "save"
    CANCEL = "cancel"
    QUIT = "quit"
    INPUT = "input"


class Config():
    """Reads the application config file.

    Attributes:
        config_file (str):  application config file.
        dflt_config (str):  the default config if none is present.
        vault_dir (str):    directory containing note files.
        escape_quits (bool): 'esc' in idle mode quits.
        time_format (str):  strftime format for modification times.
        log_file (str):     optional log file.
        keys (dict):        action name to comma-separated key names.
        styles (dict):      rich Style objects by element name.

    """
    def __init__(self, config_file, dflt_config=DEFAULT_CONFIG):
        """Initializes a Config() object."""
        self.config_file = config_file
        self.config_dir = os.path.dirname(self.config_file)
        self.dflt_config = dflt_config

        # defaults
        self.vault_dir = os.path.expandvars(
            os.path.expanduser(DEFAULT_VAULT_DIR))
        self.escape_quits = False
        self.time_format = DEFAULT_TIME_FORMAT
        self.log_file = None
        self.keys = DEFAULT_KEYS.copy()
        self.colors = DEFAULT_COLORS.copy()
        self.color_bold = True
        self.styles = {}

        self._default_config()
        self._parse_config()

    def _apply_colors(self):
        """Build styles from the configured colors, falling back to
        the default color for invalid color names.
        """
        for element, color in self.colors.items():
            bold = self.color_bold and element in ("header", "title")
            try:
                self.styles[element] = Style(color=color, bold=bold)
            except ColorParseError:
                logger.warning("invalid color '%s' for %s", color, element)
                self.styles[element] = Style(
                    color=DEFAULT_COLORS[element], bold=bold)
        # header and help bars are drawn as inverted blocks
        for element in ("header", "help"):
            self.styles[element] = Style(
                color="black",
                bgcolor=self.styles[element].color,
                bold=self.styles[element].bold,
                italic=element == "help")

    def _default_config(self):
        """Create a default configuration directory and file if they
        do not already exist.
        """
        if not os.path.exists(self.config_file):
            try:
                os.makedirs(self.config_dir, exist_ok=True)
                with open(self.config_file, "w",
                          encoding="utf-8") as config_file:
                    config_file.write(self.dflt_config)
            except OSError as error:
                raise StartupError(
                    "config file doesn't exist "
                    "and can't be created") from error

    def _parse_config(self):
        """Read and parse the configuration file."""
        config = configparser.ConfigParser()
        try:
            with open(self.config_file, "r",
                      encoding="utf-8") as config_file:
                config.read_file(config_file)
        except (OSError, UnicodeDecodeError, configparser.Error) as error:
            raise StartupError("error reading config file") from error

        try:
            if "main" in config:
                if config["main"].get("vault_dir"):
                    self.vault_dir = os.path.expandvars(
                        os.path.expanduser(
                            config["main"].get("vault_dir")))
                self.escape_quits = config["main"].getboolean(
                    "escape_quits", False)
                self.time_format = config["main"].get(
                    "time_format", DEFAULT_TIME_FORMAT)
                self.log_file = config["main"].get("log_file") or None
                if self.log_file:
                    self.log_file = os.path.expandvars(
                        os.path.expanduser(self.log_file))

            if "colors" in config:
                for element in DEFAULT_COLORS:
                    self.colors[element] = config["colors"].get(
                        element, DEFAULT_COLORS[element])
                if config["colors"].getboolean("disable_colors", False):
                    for element in self.colors:
                        self.colors[element] = "default"
                if config["colors"].getboolean("disable_bold", False):
                    self.color_bold = False

            if "keys" in config:
                for action in DEFAULT_KEYS:
                    if config["keys"].get(action):
                        self.keys[action] = config["keys"].get(action)
        except (ValueError, configparser.Error) as error:
            raise StartupError(f"invalid config file ({error})") from error

        self._apply_colors()


class VaultStore():
    """Performs note file operations within the vault directory.

    Attributes:
        vault_dir (str):    directory containing note files.
        file_ext (str):     note file extension, without the '.'.

    """
    def __init__(self, vault_dir, file_ext=NOTE_EXT):
        """Initializes a VaultStore() object."""
        self.vault_dir = vault_dir
        self.file_ext = file_ext
        self.ltz = tzlocal.get_localzone()

    def ensure_vault(self):
        """Create the vault directory (owner-only permissions) if it
        doesn't exist. Safe to call repeatedly.

        Raises:
            StartupError: the vault can't be created or used.

        """
        if os.path.exists(self.vault_dir):
            if not os.path.isdir(self.vault_dir):
                raise StartupError(f"{self.vault_dir} is not a directory")
        else:
            try:
                os.makedirs(self.vault_dir, mode=0o700, exist_ok=True)
            except OSError as error:
                raise StartupError(
                    f"{self.vault_dir} doesn't exist "
                    "and can't be created") from error
            logger.info("created vault %s", self.vault_dir)
        if not os.access(self.vault_dir, os.R_OK | os.W_OK | os.X_OK):
            raise StartupError(
                "You don't have read/write/execute permissions to "
                f"{self.vault_dir}")

    def normalize(self, name):
        """Validate a user-supplied note name and strip a typed
        extension.

        Args:
            name (str): the name as typed.

        Returns:
            name (str): the note name, without extension.

        Raises:
            InvalidName: empty, hidden, containing path separators, or
        still ending in the extension once one is stripped.

        """
        name = (name or "").strip()
        suffix = f".{self.file_ext}"
        if name.lower().endswith(suffix):
            name = name[:-len(suffix)].rstrip()
        if not name:
            raise InvalidName("a note name is required")
        if name.lower().endswith(suffix):
            raise InvalidName(f"'{name}' can't end in '{suffix}'")
        if any(char in name for char in ("/", "\\", "\0")):
            raise InvalidName(
                f"'{name}' can't contain path separators")
        if name.startswith("."):
            raise InvalidName(f"'{name}' can't start with '.'")
        return name

    def _is_note_name(self, name):
        """Check that a file's name maps back to itself, so a listed
        title opens the same file.

        Args:
            name (str): the file name without extension.

        Returns:
            valid (bool): the name is usable as a note name.

        """
        try:
            return self.normalize(name) == name
        except InvalidName:
            return False

    def note_path(self, name):
        """Map a note name to its file in the vault.

        Args:
            name (str): the note name.

        Returns:
            path (str): <vault>/<name>.<ext>

        """
        name = self.normalize(name)
        return os.path.join(self.vault_dir, f"{name}.{self.file_ext}")

    def exists(self, name):
        """Check whether a note file already exists.

        Args:
            name (str): the note name.

        Returns:
            exists (bool): a note with that name is in the vault.

        """
        return os.path.exists(self.note_path(name))

    def list_notes(self):
        """Enumerate the notes in the vault, in no particular order.

        Returns:
            summaries (list): NoteSummary for each note file.

        Raises:
            VaultIOError: the vault can't be read.

        """
        summaries = []
        suffix = f".{self.file_ext}"
        try:
            with os.scandir(self.vault_dir) as entries:
                for entry in entries:
                    if (not entry.name.endswith(suffix) or
                            entry.is_dir()):
                        continue
                    name = entry.name[:-len(suffix)]
                    if not self._is_note_name(name):
                        logger.debug("skipping %s", entry.path)
                        continue
                    try:
                        mtime = entry.stat().st_mtime
                    except FileNotFoundError:
                        # removed while listing
                        continue
                    summaries.append(NoteSummary(
                        name,
                        datetime.fromtimestamp(mtime, tz=self.ltz)))
        except OSError as error:
            raise VaultIOError(
                f"unable to read {self.vault_dir} "
                f"({error.strerror or error})") from error
        return summaries

    def create(self, name):
        """Create a new, empty note.

        Args:
            name (str): the note name.

        Returns:
            handle (file): the new file, open for read/write at
        offset 0.

        Raises:
            AlreadyExists: a note with that name exists.
            VaultIOError: the file can't be created.

        """
        path = self.note_path(name)
        if os.path.exists(path):
            raise AlreadyExists(f"note '{self.normalize(name)}' already "
                                "exists")
        try:
            handle = open(path, "x+", encoding="utf-8", newline="")
        except FileExistsError as error:
            raise AlreadyExists(f"note '{self.normalize(name)}' already "
                                "exists") from error
        except OSError as error:
            raise VaultIOError(
                f"unable to create {path} "
                f"({error.strerror or error})") from error
        logger.info("created note %s", path)
        return handle

    def reopen(self, name):
        """Open an existing note for read/write.

        Args:
            name (str): the note name.

        Returns:
            handle (file): the note file at offset 0.

        Raises:
            VaultIOError: the file can't be opened.

        """
        path = self.note_path(name)
        try:
            return open(path, "r+", encoding="utf-8", newline="")
        except OSError as error:
            raise VaultIOError(
                f"unable to open {path} "
                f"({error.strerror or error})") from error

    def open(self, name):
        """Open an existing note and read its content.

        Args:
            name (str): the note name.

        Returns:
            handle (file): the note file, positioned at offset 0.
            content (str): the full note content.

        Raises:
            VaultIOError: the file can't be opened or read.

        """
        handle = self.reopen(name)
        try:
            content = handle.read()
            handle.seek(0)
        except (OSError, ValueError) as error:
            handle.close()
            raise VaultIOError(
                f"unable to read {handle.name} ({error})") from error
        return handle, content

    def read(self, name):
        """Return the content of a note.

        Args:
            name (str): the note name.

        Returns:
            content (str): the note content.

        """
        path = self.note_path(name)
        try:
            with open(path, "r", encoding="utf-8", newline="") as source:
                return source.read()
        except (OSError, ValueError) as error:
            raise VaultIOError(f"unable to read {path} ({error})") from error

    @staticmethod
    def overwrite(handle, content):
        """Replace the whole content of a note file, then close it.

        The file is truncated, rewound and written in that order. The
        handle is closed whether or not the write succeeded.

        Args:
            handle (file):  an open note file.
            content (str):  the new content.

        Raises:
            WriteError: naming the first step that failed.

        """
        path = getattr(handle, "name", "note")
        failure = None
        step = "truncate"
        try:
            handle.truncate(0)
            step = "seek"
            handle.seek(0)
            step = "write"
            handle.write(content)
            step = "flush"
            handle.flush()
        except (OSError, ValueError) as error:
            failure = WriteError(step, path, error)
            failure.__cause__ = error
        try:
            handle.close()
        except (OSError, ValueError) as error:
            if failure is None:
                failure = WriteError("close", path, error)
                failure.__cause__ = error
        if failure is not None:
            logger.warning("save failed: %s", failure)
            raise failure
        logger.info("saved %s (%d chars)", path, len(content))


def project_notes(summaries, time_format=DEFAULT_TIME_FORMAT):
    """Build display entries for the note list, most recently
    modified first.

    Args:
        summaries (list):   NoteSummary objects.
        time_format (str):  strftime format for the modification time.

    Returns:
        entries (list): ListEntry objects.

    """
    ordered = sorted(summaries, key=lambda x: x.name)
    ordered.sort(key=lambda x: x.modified, reverse=True)
    return [
        ListEntry(
            summary.name,
            f"Modified: {summary.modified.strftime(time_format)}")
        for summary in ordered]


class OpenNote():
    """A note open for editing. The content buffer is held by the
    session's text area.

    Attributes:
        name (str):     the note name.
        path (str):     the note file.
        handle (file):  the open note file, or None once closed.

    """
    def __init__(self, name, path, handle):
        """Initializes an OpenNote() object."""
        self.name = name
        self.path = path
        self.handle = handle

    def close(self):
        """Close the file handle, if still open."""
        if self.handle is not None:
            try:
                self.handle.close()
            except OSError as error:
                logger.warning("unable to close %s: %s", self.path, error)
            self.handle = None


class TextInput():
    """Single-line text entry.

    Attributes:
        placeholder (str):  shown while empty.
        char_limit (int):   maximum length of the value.
        prompt (str):       leading prompt.
        style (Style):      text style.

    """
    def __init__(self, placeholder="", char_limit=NAME_CHAR_LIMIT,
                 prompt="> ", style=None):
        """Initializes a TextInput() object."""
        self.placeholder = placeholder
        self.char_limit = char_limit
        self.prompt = prompt
        self.style = style
        self.focused = False
        self._value = ""

    def focus(self):
        """Give the widget focus."""
        self.focused = True

    def blur(self):
        """Remove focus from the widget."""
        self.focused = False

    def value(self):
        """Return the current text."""
        return self._value

    def set_value(self, text):
        """Replace the current text, single line and within limit."""
        text = text.replace("\r", "").replace("\n", "")
        self._value = text[:self.char_limit]

    def reset(self):
        """Clear the current text."""
        self._value = ""

    def handle(self, event):
        """Apply a key event to the text.

        Args:
            event (KeyEvent): the key event.

        Returns:
            widget (TextInput): this widget.
            command (None):     no follow-up command.

        """
        if event.key == "chars":
            self.set_value(self._value + event.text)
        elif event.key == "backspace":
            self._value = self._value[:-1]
        elif event.key == "ctrl+u":
            self.reset()
        return self, None

    def render(self):
        """Render the widget.

        Returns:
            text (Text): the rendered widget.

        """
        if self._value:
            body = Text(self._value, style=self.style or "")
        else:
            body = Text(self.placeholder, style="dim")
        return Text.assemble(Text(self.prompt, style=self.style or ""), body)


class TextArea():
    """Multi-line text editing buffer. Edits happen at the end of the
    buffer.

    Attributes:
        placeholder (str):  shown while empty.

    """
    def __init__(self, placeholder=""):
        """Initializes a TextArea() object."""
        self.placeholder = placeholder
        self.focused = False
        self._value = ""

    def focus(self):
        """Give the widget focus."""
        self.focused = True

    def blur(self):
        """Remove focus from the widget."""
        self.focused = False

    def value(self):
        """Return the buffer content."""
        return self._value

    def set_value(self, text):
        """Replace the buffer content."""
        self._value = text

    def reset(self):
        """Empty the buffer."""
        self._value = ""

    def handle(self, event):
        """Apply a key event to the buffer.

        Args:
            event (KeyEvent): the key event.

        Returns:
            widget (TextArea):  this widget.
            command (None):     no follow-up command.

        """
        if event.key == "chars":
            self._value += event.text
        elif event.key == "enter":
            self._value += "\n"
        elif event.key == "tab":
            self._value += "\t"
        elif event.key == "backspace":
            self._value = self._value[:-1]
        return self, None

    def render(self):
        """Render the widget.

        Returns:
            text (Text): the rendered buffer.

        """
        if not self._value:
            return Text(self.placeholder, style="dim")
        return Text(self._value)


class NoteList():
    """Browsable list of note entries.

    Attributes:
        title (str):        list title.
        items (list):       ListEntry objects.
        index (int):        cursor position.
        page_size (int):    rows moved by pgup/pgdown.
        stale (bool):       entries need to be recomputed.

    """
    def __init__(self, title="All Notes", page_size=10, styles=None):
        """Initializes a NoteList() object."""
        self.title = title
        self.page_size = page_size
        self.styles = styles or {}
        self.items = []
        self.index = 0
        self.focused = False
        self.stale = True

    def focus(self):
        """Give the widget focus."""
        self.focused = True

    def blur(self):
        """Remove focus from the widget."""
        self.focused = False

    def mark_stale(self):
        """Flag the entries as out of date with the vault."""
        self.stale = True

    def set_items(self, entries):
        """Replace the entries, keeping the cursor in range.

        Args:
            entries (list): ListEntry objects.

        """
        self.items = list(entries)
        self.index = max(0, min(self.index, len(self.items) - 1))
        self.stale = False

    def selected(self):
        """Return the entry under the cursor, or None."""
        if not self.items:
            return None
        return self.items[self.index]

    def value(self):
        """Return the title under the cursor, or None."""
        entry = self.selected()
        return entry.title if entry else None

    def set_value(self, text):
        """Move the cursor to the entry with the given title."""
        for index, entry in enumerate(self.items):
            if entry.title == text:
                self.index = index
                break

    def handle(self, event):
        """Apply a navigation key event.

        Args:
            event (KeyEvent): the key event.

        Returns:
            widget (NoteList):  this widget.
            command (None):     no follow-up command.

        """
        last = max(len(self.items) - 1, 0)
        if event.key == "up":
            self.index = max(self.index - 1, 0)
        elif event.key == "down":
            self.index = min(self.index + 1, last)
        elif event.key == "pgup":
            self.index = max(self.index - self.page_size, 0)
        elif event.key == "pgdown":
            self.index = min(self.index + self.page_size, last)
        elif event.key == "home":
            self.index = 0
        elif event.key == "end":
            self.index = last
        return self, None

    def render(self):
        """Render the list.

        Returns:
            text (Text): the rendered list.

        """
        lines = [Text(self.title, style=self.styles.get("title", "bold"))]
        if not self.items:
            lines.append(Text("No notes.", style="dim"))
        for index, entry in enumerate(self.items):
            marker = "> " if index == self.index else "  "
            lines.append(Text.assemble(
                Text(marker, style=self.styles.get("cursor", "")),
                Text(entry.title, style=self.styles.get("title", ""))))
            lines.append(Text.assemble(
                "  ",
                Text(entry.description,
                     style=self.styles.get("description", "dim"))))
        return Text("\n").join(lines)


class ActionDispatcher():
    """Maps key events to abstract actions.

    Attributes:
        bindings (dict): key name to Action.

    """
    def __init__(self, keys=None):
        """Initializes an ActionDispatcher() object.

        Args:
            keys (dict): action name to comma-separated key names.

        """
        keys = keys or DEFAULT_KEYS
        actions = {
            "new": Action.REQUEST_NEW,
            "list": Action.REQUEST_LIST,
            "save": Action.SAVE,
            "quit": Action.QUIT,
            "cancel": Action.CANCEL,
            "accept": Action.ACCEPT,
        }
        self.bindings = {}
        for name, action in actions.items():
            for key in keys.get(name, DEFAULT_KEYS[name]).split(","):
                key = key.strip().lower()
                if key:
                    self.bindings[key] = action

    def dispatch(self, event):
        """Translate a key event into an action.

        Args:
            event (KeyEvent): the key event.

        Returns:
            action (Action): the bound action, or Action.INPUT.

        """
        if event.key == "chars":
            return Action.INPUT
        return self.bindings.get(event.key.lower(), Action.INPUT)


class SessionStateMachine():
    """Owns the interaction mode, the draft note name and the open
    note, and performs vault operations on transitions.

    Attributes:
        store (VaultStore):     the vault.
        text_input (TextInput): draft name entry.
        text_area (TextArea):   open note content buffer.
        note_list (NoteList):   note browser.
        mode (Mode):            the current mode.
        open_note (OpenNote):   the note being edited, or None.
        escape_quits (bool):    CANCEL in idle mode quits.
        time_format (str):      strftime format for the note list.

    """
    def __init__(
            self,
            store,
            text_input=None,
            text_area=None,
            note_list=None,
            escape_quits=False,
            time_format=DEFAULT_TIME_FORMAT):
        """Initializes a SessionStateMachine() object."""
        self.store = store
        self.text_input = text_input or TextInput(
            placeholder="What would you like to call it?")
        self.text_area = text_area or TextArea(
            placeholder="Write something inside your file")
        self.note_list = note_list or NoteList()
        self.escape_quits = escape_quits
        self.time_format = time_format
        self.mode = Mode.IDLE
        self.open_note = None
        self.status = None
        self.status_error = False
        self._return_mode = Mode.IDLE
        self._handlers = {
            Mode.NAMING: self._handle_naming,
            Mode.EDITING: self._handle_editing,
            Mode.LISTING: self._handle_listing,
            Mode.IDLE: self._handle_idle,
        }

    @property
    def draft(self):
        """The note name being typed (empty outside naming mode)."""
        return self.text_input.value()

    @property
    def done(self):
        """The session has ended."""
        return self.mode is Mode.QUIT

    def handle(self, action, event=None):
        """Process one action to completion.

        Args:
            action (Action):    the action.
            event (KeyEvent):   the originating key event, forwarded to
        widgets for INPUT (and ACCEPT while editing).

        Returns:
            mode (Mode): the mode after the transition.

        """
        if self.done:
            return self.mode
        before = self.mode
        if action is Action.QUIT:
            self._quit()
        else:
            self._handlers[self.mode](action, event)
        if self.mode is not before:
            logger.debug(
                "%s: %s -> %s", action.name, before.name, self.mode.name)
        return self.mode

    def view_model(self):
        """Describe what should be shown for the current mode. The
        status message is cleared once read.

        Returns:
            view (ViewModel): the view model.

        """
        title = None
        body = None
        if self.mode is Mode.NAMING:
            title = "New note"
            body = self.text_input.render()
        elif self.mode is Mode.EDITING:
            title = f"Editing: {self.open_note.name}"
            body = self.text_area.render()
        elif self.mode is Mode.LISTING:
            if self.note_list.stale:
                self._refresh_list()
            body = self.note_list.render()
        view = ViewModel(
            self.mode, title, body, self.status, self.status_error)
        self.status = None
        self.status_error = False
        return view

    def report(self, message, error=True):
        """Set the transient status message.

        Args:
            message (str):  the message.
            error (bool):   the message reports a failure.

        """
        self.status = str(message)
        self.status_error = error
        if error:
            logger.warning("%s (mode %s)", message, self.mode.name)

    def _handle_idle(self, action, event):
        """Idle: start a new note or open the list."""
        if action is Action.REQUEST_NEW:
            self._start_naming()
        elif action is Action.REQUEST_LIST:
            self._show_list()
        elif action is Action.CANCEL and self.escape_quits:
            self._quit()

    def _handle_naming(self, action, event):
        """Naming: edit the draft, accept or cancel it."""
        if action is Action.ACCEPT:
            self._accept_draft()
        elif action is Action.CANCEL:
            self.text_input.reset()
            self.text_input.blur()
            self.mode = self._return_mode
        elif action is Action.INPUT and event is not None:
            self.text_input.handle(event)

    def _handle_editing(self, action, event):
        """Editing: edit the buffer; save or escape writes the note."""
        if action in (Action.SAVE, Action.CANCEL):
            self._save()
        elif action in (Action.INPUT, Action.ACCEPT) and event is not None:
            self.text_area.handle(event)

    def _handle_listing(self, action, event):
        """Listing: navigate, open a note, start a new one or go back."""
        if action is Action.REQUEST_NEW:
            self._start_naming()
        elif action is Action.REQUEST_LIST:
            self._show_list()
        elif action is Action.ACCEPT:
            self._open_selected()
        elif action is Action.CANCEL:
            self.note_list.blur()
            self.mode = Mode.IDLE
        elif action is Action.INPUT and event is not None:
            self.note_list.handle(event)

    def _start_naming(self):
        """Enter naming mode with an empty draft."""
        self._return_mode = self.mode
        self.text_input.reset()
        self.text_input.focus()
        self.mode = Mode.NAMING

    def _refresh_list(self):
        """Recompute the note list entries.

        Returns:
            refreshed (bool): the vault was read.

        """
        try:
            summaries = self.store.list_notes()
        except NoteifyError as error:
            self.report(error)
            return False
        self.note_list.set_items(project_notes(summaries, self.time_format))
        return True

    def _show_list(self):
        """Enter listing mode with freshly computed entries."""
        if self._refresh_list():
            self.note_list.focus()
            self.mode = Mode.LISTING

    def _accept_draft(self):
        """Create the drafted note and open it for editing."""
        try:
            name = self.store.normalize(self.draft)
            handle = self.store.create(name)
        except NoteifyError as error:
            self.report(error)
            return
        self.open_note = OpenNote(name, handle.name, handle)
        self.text_input.reset()
        self.text_input.blur()
        self.text_area.reset()
        self.text_area.focus()
        self.mode = Mode.EDITING

    def _open_selected(self):
        """Open the note under the list cursor for editing."""
        entry = self.note_list.selected()
        if entry is None:
            return
        try:
            handle, content = self.store.open(entry.title)
        except NoteifyError as error:
            self.report(error)
            return
        self.open_note = OpenNote(entry.title, handle.name, handle)
        self.note_list.blur()
        self.text_area.set_value(content)
        self.text_area.focus()
        self.mode = Mode.EDITING

    def _save(self):
        """Write the buffer to the open note and close it."""
        note = self.open_note
        try:
            if note.handle is None:
                note.handle = self.store.reopen(note.name)
            handle, note.handle = note.handle, None
            self.store.overwrite(handle, self.text_area.value())
        except NoteifyError as error:
            self.report(error)
            return
        self.open_note = None
        self.text_area.reset()
        self.text_area.blur()
        self.mode = Mode.IDLE
        self.report(f"Saved note: {note.name}", error=False)

    def _quit(self):
        """End the session. An unsaved buffer is discarded."""
        if self.open_note is not None:
            logger.warning(
                "discarding unsaved changes to '%s'", self.open_note.name)
            self.open_note.close()
            self.open_note = None
        self.text_input.reset()
        self.text_area.reset()
        self.mode = Mode.QUIT


class FSHandler(FileSystemEventHandler):
    """Handler to watch for vault changes and mark the note list stale.

    Attributes:
        note_list (obj):    the NoteList to invalidate.

    """
    def __init__(self, note_list):
        """Initializes an FSHandler() object."""
        self.note_list = note_list

    def on_any_event(self, event):
        """Mark the note list stale on vault changes.

        Args:
            event (obj):    file system event.

        """
        if event.event_type in [
                'created', 'modified', 'deleted', 'moved']:
            self.note_list.mark_stale()


class NoteifyShell(Cmd):
    """Interactive shell. Lines starting with ':' are keys or commands
    (':new', ':save', ':key ctrl+s'); any other line is typed into the
    focused widget and followed by 'enter'.

    Attributes:
        machine (obj):      a SessionStateMachine().
        dispatcher (obj):   an ActionDispatcher().
        config (obj):       a Config().

    """
    def __init__(
            self,
            machine,
            dispatcher,
            config=None,
            watch=True,
            completekey='tab',
            stdin=None,
            stdout=None):
        """Initializes a NoteifyShell() object."""
        super().__init__(completekey=completekey, stdin=stdin, stdout=stdout)
        self.machine = machine
        self.dispatcher = dispatcher
        self.config = config
        self.watch = watch
        self.observer = None
        self.styles = config.styles if config else {}
        self.console = Console(file=self.stdout)

        # class overrides for Cmd
        self.doc_header = (
            "Commands, prefixed with ':' (for more info type: :help):"
        )
        self.ruler = "―"
        self.nohelp = (
            "\nNo help for %s\n"
        )
        self._set_prompt()

    # class method overrides
    def preloop(self):
        """Start watching the vault and draw the first view."""
        if self.watch:
            self.observer = Observer()
            self.observer.schedule(
                FSHandler(self.machine.note_list),
                self.machine.store.vault_dir,
                recursive=False)
            self.observer.start()
        self.render()

    def postloop(self):
        """Stop watching the vault."""
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None

    def onecmd(self, line):
        """Route ':' lines to commands and anything else to the focused
        widget.

        Args:
            line (str): the input line.

        Returns:
            stop (bool): the session has ended.

        """
        if line.startswith(":"):
            command = line[1:].strip()
            if not command:
                return False
            return super().onecmd(command)
        if not line:
            return self.emptyline()
        return self.send(chars(line), KeyEvent("enter"))

    def postcmd(self, stop, line):
        """Redraw after each line unless the session ended or help was
        printed.
        """
        if not stop and not line.lstrip(":").startswith("help"):
            self.render()
        self._set_prompt()
        return stop

    def default(self, args):
        """Treat unknown ':' commands as key names.

        Args:
            args (str): the command arguments.

        """
        if args == "exit":
            return self.do_quit("")
        if " " in args.strip():
            self.machine.report("no such command, see ':help'")
            return False
        return self.send(KeyEvent(args.strip().lower()))

    def emptyline(self):
        """A blank line is a newline while editing; otherwise ignored."""
        if self.machine.mode is Mode.EDITING:
            return self.send(KeyEvent("enter"))
        return False

    def _set_prompt(self):
        """Set the prompt string for the current mode."""
        label = {
            Mode.NAMING: "name",
            Mode.EDITING: "edit",
            Mode.LISTING: "list",
        }.get(self.machine.mode, APP_NAME)
        if self.config is None or self.config.color_bold:
            self.prompt = f"\033[1m{label}\033[0m> "
        else:
            self.prompt = f"{label}> "

    def send(self, *events):
        """Dispatch key events to the state machine.

        Args:
            events (KeyEvent): the events, in order.

        Returns:
            stop (bool): the session has ended.

        """
        for event in events:
            action = self.dispatcher.dispatch(event)
            self.machine.handle(action, event)
            if self.machine.done:
                return True
        return False

    def render(self):
        """Print the current view."""
        view = self.machine.view_model()
        parts = [
            Text(""),
            Text(" Welcome to Noteify! ", style=self.styles.get("header", "")),
            Text("")]
        if view.title:
            parts.append(Text(view.title, style=self.styles.get("title", "")))
        if view.body is not None:
            parts.extend([view.body, Text("")])
        if view.status:
            if view.is_error:
                parts.append(Text(
                    f"ERROR: {view.status}.",
                    style=self.styles.get("status", "")))
            else:
                parts.append(Text(view.status))
            parts.append(Text(""))
        parts.append(Text(f" {HELP_TEXT} ", style=self.styles.get("help", "")))
        self.console.clear()
        self.console.print(Group(*parts))

    def do_new(self, args):
        """Start a new note."""
        return self.send(self._key("new"))

    def do_list(self, args):
        """Show the note list."""
        return self.send(self._key("list"))

    def do_save(self, args):
        """Save the open note."""
        return self.send(self._key("save"))

    def do_quit(self, args):
        """Quit noteify. Unsaved changes are discarded."""
        return self.send(self._key("quit"))

    def do_esc(self, args):
        """Go back, or save and close the open note."""
        return self.send(self._key("cancel"))

    def do_open(self, args):
        """Open the selected note from the list."""
        return self.send(self._key("accept"))

    def do_up(self, args):
        """Move the list cursor up."""
        return self.send(KeyEvent("up"))

    def do_down(self, args):
        """Move the list cursor down."""
        return self.send(KeyEvent("down"))

    def do_key(self, args):
        """Send raw key names, e.g. ':key ctrl+s'."""
        keys = args.split()
        if not keys:
            self.help_key()
            return False
        return self.send(*[KeyEvent(key.lower()) for key in keys])

    def do_refresh(self, args):
        """Refresh the note list from the vault.

        Args:
            args (str): 'silent' suppresses the confirmation.

        """
        self.machine.note_list.mark_stale()
        if args != 'silent':
            self.machine.report("Data refreshed.", error=False)
        return False

    def _key(self, action):
        """Build the event for the first key bound to an action."""
        keys = DEFAULT_KEYS
        if self.config is not None:
            keys = self.config.keys
        return KeyEvent(keys[action].split(",")[0].strip().lower())

    @staticmethod
    def help_key():
        """Output help for 'key' command."""
        print(
            '\n:key <key> [key ...]:\n'
            '    Send key names (e.g. ctrl+s, esc, enter, up, down, '
            'backspace) as if pressed.\n'
        )

    @staticmethod
    def help_refresh():
        """Output help for 'refresh' command."""
        print(
            '\n:refresh:\n'
            '    Refresh the note list from files on disk. The list is '
            'also refreshed automatically when files change.\n'
        )


def setup_logging(debug=False, log_file=None):
    """Configure logging.

    Args:
        debug (bool):       log DEBUG records to stderr.
        log_file (str):     also log to this file.

    """
    fmt = "%(asctime)s %(name)s %(levelname)s: %(message)s"
    if debug:
        logging.basicConfig(level=logging.DEBUG, format=fmt,
                            datefmt="%H:%M:%S")
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(fmt))
        root = logging.getLogger()
        root.addHandler(handler)
        if not debug:
            root.setLevel(logging.INFO)


def error_exit(errormsg):
    """Print an error message and exit with a status of 1

    Args:
        errormsg (str): the error message to display.

    """
    print(f'ERROR: {errormsg}.', file=sys.stderr)
    sys.exit(1)


def print_note_list(entries, styles):
    """Print the formatted note list.

    Args:
        entries (list): ListEntry objects.
        styles (dict):  rich styles by element.

    """
    console = Console()
    notes_table = Table(
        title="Notes",
        title_style=styles.get("title"),
        title_justify="left",
        box=box.SIMPLE,
        show_header=False,
        show_lines=False,
        pad_edge=False,
        collapse_padding=False,
        min_width=40,
        padding=(0, 0, 0, 0))
    notes_table.add_column("column1")
    for entry in entries:
        line = Text.assemble(
            "- ",
            Text(entry.title, style=styles.get("title", "")),
            "\n   ",
            Text(entry.description, style=styles.get("description", "")))
        notes_table.add_row(line)
    if not entries:
        notes_table.add_row(Text("None"))
    console.print(notes_table)


def parse_args(argv=None):
    """Parse command line arguments.

    Args:
        argv (list): arguments, defaults to sys.argv[1:].

    Returns:
        parser (obj):   the ArgumentParser.
        args (obj):     the parsed arguments.

    """
    parser = argparse.ArgumentParser(
        description='Terminal-based note taking.',
        epilog=f'for more help: {APP_NAME} <command> -h')
    subparsers = parser.add_subparsers(
        title='commands',
        metavar='(for more help: %(prog)s <command> -h)')
    listnotes = subparsers.add_parser(
        'list',
        aliases=['ls'],
        help='list notes')
    listnotes.set_defaults(command='list')
    new = subparsers.add_parser(
        'new',
        help='create a new note')
    new.add_argument(
        'name',
        help='note name')
    new.add_argument(
        '--content',
        metavar='<text>',
        help='initial note content')
    new.set_defaults(command='new')
    shell = subparsers.add_parser(
        'shell',
        help='interactive shell')
    shell.set_defaults(command='shell')
    version = subparsers.add_parser(
        'version',
        help='show version info')
    version.set_defaults(command='version')
    parser.add_argument(
        '-c',
        '--config',
        dest='config',
        metavar='<file>',
        help='config file')
    parser.add_argument(
        '-d',
        '--debug',
        dest='debug',
        action='store_true',
        help='enable debug logging')
    args = parser.parse_args(argv)
    return parser, args


def main(argv=None):
    """Entry point. Parses arguments, prepares the vault and runs the
    requested command.

    Args:
        argv (list): arguments, defaults to sys.argv[1:].

    """
    if os.environ.get("XDG_CONFIG_HOME"):
        config_file = os.path.join(
            os.path.expandvars(os.path.expanduser(
                os.environ["XDG_CONFIG_HOME"])), APP_NAME, "config")
    else:
        config_file = os.path.expandvars(
            os.path.expanduser(DEFAULT_CONFIG_FILE))

    parser, args = parse_args(argv)
    command = getattr(args, "command", None) or "shell"

    if command == "version":
        print(f"{APP_NAME} {APP_VERS}")
        print(APP_COPYRIGHT)
        print(APP_LICENSE)
        return

    if args.config:
        config_file = os.path.expandvars(
            os.path.expanduser(args.config))

    try:
        config = Config(config_file, DEFAULT_CONFIG)
        setup_logging(args.debug, config.log_file)
        store = VaultStore(config.vault_dir)
        store.ensure_vault()
    except (StartupError, OSError) as error:
        error_exit(str(error))

    if command == "list":
        try:
            entries = project_notes(store.list_notes(), config.time_format)
        except NoteifyError as error:
            error_exit(str(error))
        print_note_list(entries, config.styles)
    elif command == "new":
        try:
            handle = store.create(args.name)
            store.overwrite(handle, args.content or "")
        except NoteifyError as error:
            error_exit(str(error))
        print(f"Added note: {store.normalize(args.name)}")
    elif command == "shell":
        machine = SessionStateMachine(
            store,
            text_input=TextInput(
                placeholder="What would you like to call it?",
                style=config.styles.get("cursor")),
            note_list=NoteList(styles=config.styles),
            escape_quits=config.escape_quits,
            time_format=config.time_format)
        shell = NoteifyShell(
            machine, ActionDispatcher(config.keys), config)
        try:
            shell.cmdloop()
        except KeyboardInterrupt:
            print("\nInterrupted.")
            sys.exit(1)
        except NoteifyError as error:
            logger.exception("event loop failed")
            error_exit(f"Alas, there's been an error: {error}")
        finally:
            shell.postloop()
    else:
        parser.print_help(sys.stderr)
        sys.exit(1)


# entry point
if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)
