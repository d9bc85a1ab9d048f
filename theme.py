from __future__ import annotations

from store import MeetingStore, ToggleDisplayMode

_QSS = """
QWidget {{ background: {bg}; color: {fg}; }}
QGroupBox {{ border: 1px solid {line}; border-radius: 6px; margin-top: 10px; }}
QLineEdit, QPlainTextEdit, QComboBox, QDateEdit, QListWidget, QTableWidget {{ background: {field}; border: 1px solid {line}; }}
QListWidget::item:selected, QTableWidget::item:selected {{ background: {accent}; }}
"""

LIGHT_QSS = _QSS.format(bg="#f4f5f7", fg="#1f2430", line="#d0d5dd", field="#ffffff", accent="#d6e4ff")
DARK_QSS = _QSS.format(bg="#1b1f26", fg="#e4e8ee", line="#39404c", field="#252a33", accent="#2d568f")


class ThemeManager:
    """Applies the store's persisted display mode to the running QApplication."""

    def __init__(self, store: MeetingStore):
        self.store = store

    def apply(self, app):
        app.setStyleSheet(DARK_QSS if self.store.state.dark_mode else LIGHT_QSS)

    def toggle(self, app):
        self.store.dispatch(ToggleDisplayMode())
        self.apply(app)
