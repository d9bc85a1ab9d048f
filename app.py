from __future__ import annotations
from pathlib import Path
import sys, logging, traceback
from PyQt6 import QtCore, QtWidgets
from settings import APP_TITLE, LOGGER_NAME, LOG_FORMAT, DEFAULT_CSV_EXPORT_NAME, DEFAULT_JSON_EXPORT_NAME, data_root
from errors import ParseError, ValidationError
from exporters import debug_export_name, write_export
from persistence import Persistence
from stats import sort_meetings_newest_first
from storage import JsonFileStore
from store import AddMeeting, AppState, DeleteMeeting, MeetingStore, create_meeting
from ui_editor import DashboardPage, MeetingEditorPage, QuickNotesPage
from theme import ThemeManager

log = logging.getLogger(LOGGER_NAME)


def setup_logging(root: Path) -> None:
    log.setLevel(logging.DEBUG)
    if log.handlers: return
    fmt = logging.Formatter(LOG_FORMAT)
    ch = logging.StreamHandler(); ch.setLevel(logging.INFO); ch.setFormatter(fmt); log.addHandler(ch)
    (root / "logs").mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(root / "logs" / "app.log", encoding="utf-8"); fh.setLevel(logging.DEBUG); fh.setFormatter(fmt); log.addHandler(fh)


class NewMeetingDialog(QtWidgets.QDialog):
    def __init__(self, parent=None):
        super().__init__(parent); self.setWindowTitle("New Meeting")
        form = QtWidgets.QFormLayout(self)
        self.ed_title = QtWidgets.QLineEdit(); self.ed_client = QtWidgets.QLineEdit()
        self.ed_date = QtWidgets.QDateEdit(QtCore.QDate.currentDate()); self.ed_date.setCalendarPopup(True); self.ed_date.setDisplayFormat("yyyy-MM-dd")
        form.addRow("Title:", self.ed_title); form.addRow("Client:", self.ed_client); form.addRow("Date:", self.ed_date)
        bb = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel)
        bb.accepted.connect(self.accept); bb.rejected.connect(self.reject); form.addRow(bb)

    def meeting(self):
        return create_meeting(self.ed_title.text(), self.ed_date.date().toString("yyyy-MM-dd"), self.ed_client.text())


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, root: Path | None = None):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.data_root = Path(root) if root else data_root()
        self.store = MeetingStore(Persistence(JsonFileStore(self.data_root)))
        self.store.load()
        self.theme = ThemeManager(self.store)
        self._build_ui()
        self.theme.apply(QtWidgets.QApplication.instance())
        self.store.subscribe(self._on_state_changed)
        self._on_state_changed(self.store.state)
        self.nav.setCurrentRow(0)

    def _build_ui(self):
        self.resize(1200, 800)
        tb = QtWidgets.QToolBar("Main"); self.addToolBar(tb)
        tb.addAction("New Meeting").triggered.connect(self.on_new_meeting)
        tb.addAction("Delete Meeting").triggered.connect(self.on_delete_meeting)
        tb.addAction("New Issue").triggered.connect(self.on_new_issue)
        tb.addSeparator()
        tb.addAction("Export JSON").triggered.connect(self.on_export_json)
        tb.addAction("Export CSV").triggered.connect(self.on_export_csv)
        tb.addAction("Import JSON").triggered.connect(self.on_import_json)
        tb.addSeparator()
        tb.addAction("Debug Export").triggered.connect(self.on_debug_export)
        tb.addAction("Clear All Data").triggered.connect(self.on_clear_all)
        tb.addSeparator()
        tb.addAction("Light/Dark").triggered.connect(self.on_toggle_theme)

        split = QtWidgets.QSplitter(); split.setOrientation(QtCore.Qt.Orientation.Horizontal); self.setCentralWidget(split)
        self.nav = QtWidgets.QListWidget(); self.nav.setMinimumWidth(280)
        split.addWidget(self.nav)
        self.center = QtWidgets.QStackedWidget(); split.addWidget(self.center)
        self.dashboard = DashboardPage(self.store); self.center.addWidget(self.dashboard)
        self.notes = QuickNotesPage(self.store); self.center.addWidget(self.notes)
        self.editor: MeetingEditorPage | None = None
        self.nav.currentItemChanged.connect(self._on_nav_selected)
        self.statusBar().showMessage("Ready")

    def _current_context(self):
        item = self.nav.currentItem()
        return item.data(QtCore.Qt.ItemDataRole.UserRole) if item else None

    def _refresh_nav(self, state: AppState):
        current = self._current_context()
        self.nav.blockSignals(True)
        self.nav.clear()
        entries = [("Dashboard", ("dashboard",)), ("Quick Notes", ("notes",))]
        entries += [(f"{m.date}  {m.title}", ("meeting", m.id)) for m in sort_meetings_newest_first(state.data.meetings)]
        for text, key in entries:
            item = QtWidgets.QListWidgetItem(text); item.setData(QtCore.Qt.ItemDataRole.UserRole, key)
            self.nav.addItem(item)
            if key == current: self.nav.setCurrentItem(item)
        self.nav.blockSignals(False)
        if current and self._current_context() != current:
            self.nav.setCurrentRow(0)

    def _on_state_changed(self, state: AppState):
        self._refresh_nav(state)
        self.dashboard.refresh(state); self.notes.refresh(state)
        if self.editor: self.editor.refresh(state)
        stats = self.store.stats()
        self.statusBar().showMessage(f"{stats.total_meetings} meetings, {stats.total_issues} issues, {len(state.quick_notes)} notes")

    def _on_nav_selected(self, *_):
        data = self._current_context()
        if not data: return
        if data[0] == "meeting":
            self._show_meeting(data[1])
        elif data[0] == "notes":
            self.center.setCurrentWidget(self.notes)
        else:
            self.center.setCurrentWidget(self.dashboard)

    def _show_meeting(self, meeting_id: str):
        if self.editor:
            self.center.removeWidget(self.editor); self.editor.deleteLater()
        self.editor = MeetingEditorPage(self.store, meeting_id)
        self.center.addWidget(self.editor); self.center.setCurrentWidget(self.editor)

    def _current_meeting_id(self):
        data = self._current_context()
        return data[1] if data and data[0] == "meeting" else None

    def on_new_meeting(self):
        dlg = NewMeetingDialog(self)
        while dlg.exec():
            try:
                m = dlg.meeting()
            except ValidationError as e:
                QtWidgets.QMessageBox.warning(self, "Invalid meeting", str(e)); continue
            self.store.dispatch(AddMeeting(m))
            self._select_meeting(m.id)
            return

    def _select_meeting(self, meeting_id: str):
        for row in range(self.nav.count()):
            if self.nav.item(row).data(QtCore.Qt.ItemDataRole.UserRole) == ("meeting", meeting_id):
                self.nav.setCurrentRow(row); return

    def on_delete_meeting(self):
        mid = self._current_meeting_id()
        m = self.store.state.data.find_meeting(mid) if mid else None
        if not m:
            QtWidgets.QMessageBox.information(self, "Select meeting", "Select a meeting to delete."); return
        yes, no = QtWidgets.QMessageBox.StandardButton.Yes, QtWidgets.QMessageBox.StandardButton.No
        if QtWidgets.QMessageBox.question(self, "Delete Meeting", f"Delete meeting '{m.title}' and its {len(m.issues)} issues?", yes | no) == yes:
            self.store.dispatch(DeleteMeeting(m.id))

    def on_new_issue(self):
        if not (self.editor and self.center.currentWidget() is self.editor):
            QtWidgets.QMessageBox.information(self, "Select meeting", "Select a meeting to add an issue to."); return
        self.editor.add_issue()

    def _save_export(self, payload: bytes, default_name: str, filter_: str):
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export", str(Path.home() / default_name), filter_)
        if not path: return
        try:
            dest = write_export(payload, Path(path))
        except OSError as exc:
            log.exception("Export failed", exc_info=exc)
            QtWidgets.QMessageBox.critical(self, "Export failed", str(exc)); return
        self.statusBar().showMessage(f"Exported to {dest}")

    def on_export_json(self):
        self._save_export(self.store.export_json(), DEFAULT_JSON_EXPORT_NAME, "JSON (*.json)")

    def on_export_csv(self):
        self._save_export(self.store.export_csv(), DEFAULT_CSV_EXPORT_NAME, "CSV (*.csv)")

    def on_debug_export(self):
        self._save_export(self.store.export_json(debug=True), debug_export_name(), "JSON (*.json)")

    def on_import_json(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Import JSON", str(Path.home()), "JSON (*.json)")
        if not path: return
        try:
            data = self.store.import_json(Path(path).read_bytes())
        except (ParseError, OSError) as exc:
            log.error("Import error: %s", exc)
            QtWidgets.QMessageBox.warning(self, "Import failed", "Error importing data. Please check the file format."); return
        QtWidgets.QMessageBox.information(self, "Import complete", f"Data imported successfully! ({len(data.meetings)} meetings)")

    def on_clear_all(self):
        yes, no = QtWidgets.QMessageBox.StandardButton.Yes, QtWidgets.QMessageBox.StandardButton.No
        if QtWidgets.QMessageBox.question(self, "Clear All Data", "Are you sure you want to clear ALL data? This cannot be undone!", yes | no) == yes:
            self.store.clear_all()

    def on_toggle_theme(self):
        self.theme.toggle(QtWidgets.QApplication.instance())


def main():
    root = data_root()
    setup_logging(root)
    log.info("Starting %s (data in %s)", APP_TITLE, root)
    app = QtWidgets.QApplication(sys.argv)
    try:
        w = MainWindow(root)
        w.show()
    except Exception as e:
        log.exception("Exception while creating MainWindow")
        mb = QtWidgets.QMessageBox(); mb.setIcon(QtWidgets.QMessageBox.Icon.Critical)
        mb.setWindowTitle("Startup error"); mb.setText(str(e)); mb.setDetailedText(traceback.format_exc()); mb.exec()
        return 1
    rc = app.exec(); log.info("QApplication exited with code %s", rc); return rc

if __name__ == "__main__":
    sys.exit(main())
