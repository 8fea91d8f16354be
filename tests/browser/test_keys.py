"""Tests for terminal key decoding."""

import pytest

from browser.keys import decode
from markup_view.view import Key


class TestDecode:
    @pytest.mark.parametrize("sequence,key", [
        ("\x1b[A", Key.UP),
        ("\x1b[B", Key.DOWN),
        ("\x1b[C", Key.RIGHT),
        ("\x1b[D", Key.LEFT),
        ("\x1bOA", Key.UP),
        ("\x1bOD", Key.LEFT),
    ])
    def test_arrows(self, sequence, key):
        assert decode(sequence) is key

    def test_enter(self):
        assert decode("\r") is Key.ENTER
        assert decode("\n") is Key.ENTER

    def test_backspace(self):
        assert decode("\x7f") is Key.BACKSPACE
        assert decode("\x08") is Key.BACKSPACE

    def test_paging(self):
        assert decode("\x1b[5~") is Key.PAGE_UP
        assert decode("\x1b[6~") is Key.PAGE_DOWN
        assert decode("\x1b[H") is Key.HOME
        assert decode("\x1b[F") is Key.END

    def test_lone_escape(self):
        assert decode("\x1b") is Key.ESCAPE

    def test_printable(self):
        assert decode("q") == "q"
        assert decode(" ") == " "

    def test_unknown_sequence(self):
        assert decode("\x1b[15~") is None

    def test_control_character(self):
        assert decode("\x01") is None
