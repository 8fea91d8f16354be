"""Read keys from the terminal and translate them into view events."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from typing import Optional, TextIO

from markup_view.view import Event, Key

ESC = "\x1b"

_SEQUENCES: dict[str, Key] = {
    "\x1b[A": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1bOA": Key.UP,
    "\x1bOB": Key.DOWN,
    "\x1bOC": Key.RIGHT,
    "\x1bOD": Key.LEFT,
    "\x1b[H": Key.HOME,
    "\x1b[F": Key.END,
    "\x1b[1~": Key.HOME,
    "\x1b[4~": Key.END,
    "\x1b[5~": Key.PAGE_UP,
    "\x1b[6~": Key.PAGE_DOWN,
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\t": Key.TAB,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
    ESC: Key.ESCAPE,
}


def decode(sequence: str) -> Optional[Event]:
    """Translate raw terminal input into a ``Key`` or a printable character.

    Returns None for sequences that mean nothing to the browser.
    """
    if sequence in _SEQUENCES:
        return _SEQUENCES[sequence]
    if len(sequence) == 1 and sequence.isprintable():
        return sequence
    return None


def _read_sequence(fd: int) -> str:
    """Read the rest of an escape sequence, if more bytes are pending."""
    sequence = ESC
    r, _, _ = select.select([fd], [], [], 0.05)
    if not r:
        return sequence
    sequence += os.read(fd, 1).decode("utf-8", errors="ignore")
    if sequence[-1] not in "[O":
        return sequence
    # CSI / SS3: read up to the final byte
    while True:
        char = os.read(fd, 1).decode("utf-8", errors="ignore")
        sequence += char
        if not char or "@" <= char <= "~":
            return sequence


def read_key(stream: TextIO = sys.stdin) -> Optional[Event]:
    """Block until a key is pressed and return it decoded."""
    fd = stream.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        char = os.read(fd, 1).decode("utf-8", errors="ignore")
        if char == ESC:
            char = _read_sequence(fd)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
    return decode(char)
