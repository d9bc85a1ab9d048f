import pytest

pytest.importorskip("PyQt6.QtWidgets")

import ui_editor  # noqa: E402


class FakeLineEdit:
    def __init__(self, text, focused):
        self._text, self._focused = text, focused

    def hasFocus(self):
        return self._focused

    def text(self):
        return self._text

    def setText(self, text):
        self._text = text


def test_set_text_leaves_focused_field_alone():
    w = FakeLineEdit("half typed", focused=True)
    ui_editor._set_text(w, "stored title")
    assert w.text() == "half typed"


def test_set_text_updates_unfocused_field():
    w = FakeLineEdit("old", focused=False)
    ui_editor._set_text(w, "stored title")
    assert w.text() == "stored title"
