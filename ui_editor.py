from __future__ import annotations
from dataclasses import replace
from PyQt6 import QtCore, QtWidgets
from models import ISSUE_PRIORITIES, ISSUE_STATUSES, Issue, QuickNote
from errors import ValidationError
from stats import compute_stats, meeting_status_counts, recent_meetings, sort_notes_newest_first
from store import (AddIssue, AddQuickNote, AppState, DeleteIssue, DeleteQuickNote, MeetingStore, UpdateIssue,
                   UpdateMeeting, UpdateQuickNote, create_issue, create_quick_note, validate_issue,
                   validate_meeting, validate_quick_note)

ISSUE_COLUMNS = ["Topic", "Status", "Priority", "Assignee", "Solution"]


def _set_text(w: QtWidgets.QLineEdit, text: str):
    # leave a field alone while the user is typing in it
    if not w.hasFocus() and w.text() != text: w.setText(text)


def _confirm(parent, title: str, text: str) -> bool:
    yes, no = QtWidgets.QMessageBox.StandardButton.Yes, QtWidgets.QMessageBox.StandardButton.No
    return QtWidgets.QMessageBox.question(parent, title, text, yes | no) == yes


class IssueDialog(QtWidgets.QDialog):
    def __init__(self, issue: Issue | None = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Issue" if issue else "New Issue")
        self.base = issue
        grid = QtWidgets.QGridLayout(self)
        self.e_topic = QtWidgets.QLineEdit(issue.topic if issue else "")
        self.e_status = QtWidgets.QComboBox(); self.e_status.addItems(ISSUE_STATUSES)
        self.e_priority = QtWidgets.QComboBox(); self.e_priority.addItems(ISSUE_PRIORITIES)
        self.e_assignee = QtWidgets.QLineEdit(issue.assignee if issue else "")
        self.e_solution = QtWidgets.QPlainTextEdit(issue.solution if issue else "")
        self.e_note = QtWidgets.QPlainTextEdit(issue.note if issue else "")
        self.e_status.setCurrentText(issue.status if issue else "pending")
        self.e_priority.setCurrentText(issue.priority if issue else "medium")
        self.e_status.setEnabled(issue is not None)

        r=0
        grid.addWidget(QtWidgets.QLabel("Topic"), r,0); grid.addWidget(self.e_topic, r,1,1,3); r+=1
        grid.addWidget(QtWidgets.QLabel("Status"), r,0); grid.addWidget(self.e_status, r,1)
        grid.addWidget(QtWidgets.QLabel("Priority"), r,2); grid.addWidget(self.e_priority, r,3); r+=1
        grid.addWidget(QtWidgets.QLabel("Assignee"), r,0); grid.addWidget(self.e_assignee, r,1,1,3); r+=1
        grid.addWidget(QtWidgets.QLabel("Solution"), r,0); grid.addWidget(self.e_solution, r,1,1,3); r+=1
        grid.addWidget(QtWidgets.QLabel("Note"), r,0); grid.addWidget(self.e_note, r,1,1,3); r+=1
        bb = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel)
        bb.accepted.connect(self.accept); bb.rejected.connect(self.reject)
        grid.addWidget(bb, r,0,1,4)

    def issue(self) -> Issue:
        """Build the issue from the form; raises ValidationError on bad input."""
        if self.base is None:
            issue = create_issue(self.e_topic.text(), self.e_priority.currentText(), self.e_assignee.text())
            return replace(issue, solution=self.e_solution.toPlainText(), note=self.e_note.toPlainText())
        return validate_issue(replace(
            self.base, topic=self.e_topic.text(), status=self.e_status.currentText(),
            priority=self.e_priority.currentText(), assignee=self.e_assignee.text(),
            solution=self.e_solution.toPlainText(), note=self.e_note.toPlainText(),
        ))


class QuickNoteDialog(QtWidgets.QDialog):
    def __init__(self, note: QuickNote | None = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Note" if note else "New Note")
        self.base = note
        v = QtWidgets.QVBoxLayout(self)
        self.e_title = QtWidgets.QLineEdit((note.title or "") if note else ""); self.e_title.setPlaceholderText("Title (optional)")
        self.e_content = QtWidgets.QPlainTextEdit(note.content if note else ""); self.e_content.setPlaceholderText("Write a note…")
        v.addWidget(self.e_title); v.addWidget(self.e_content, 1)
        bb = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel)
        bb.accepted.connect(self.accept); bb.rejected.connect(self.reject)
        v.addWidget(bb)

    def note(self) -> QuickNote:
        if self.base is None:
            return create_quick_note(self.e_content.toPlainText(), self.e_title.text())
        return validate_quick_note(replace(self.base, title=self.e_title.text(), content=self.e_content.toPlainText()))


class DashboardPage(QtWidgets.QWidget):
    def __init__(self, store: MeetingStore, parent=None):
        super().__init__(parent); self.store = store
        lay = QtWidgets.QVBoxLayout(self); lay.setContentsMargins(12,12,12,12)
        box = QtWidgets.QGroupBox("Overview"); g = QtWidgets.QGridLayout(box)
        self.labels: dict[str, QtWidgets.QLabel] = {}
        for r, (key, text) in enumerate([("total_meetings","Meetings"), ("total_issues","Issues"), ("pending_issues","Pending"),
                                         ("in_progress_issues","In progress"), ("solved_issues","Solved"), ("archived_issues","Archived")]):
            self.labels[key] = QtWidgets.QLabel("0")
            g.addWidget(QtWidgets.QLabel(text), r // 3, (r % 3) * 2); g.addWidget(self.labels[key], r // 3, (r % 3) * 2 + 1)
        lay.addWidget(box)
        recent = QtWidgets.QGroupBox("Recent meetings"); rv = QtWidgets.QVBoxLayout(recent)
        self.recent = QtWidgets.QListWidget(); rv.addWidget(self.recent)
        lay.addWidget(recent, 1)

    def refresh(self, state: AppState):
        stats = compute_stats(state.data)
        for key, label in self.labels.items():
            label.setText(str(getattr(stats, key)))
        self.recent.clear()
        for m in recent_meetings(state.data):
            pending = meeting_status_counts(m)["pending"]
            self.recent.addItem(f"{m.date}  {m.title} ({m.client or 'no client'}): {len(m.issues)} issues, {pending} pending")


class MeetingEditorPage(QtWidgets.QWidget):
    def __init__(self, store: MeetingStore, meeting_id: str, parent=None):
        super().__init__(parent); self.store, self.meeting_id = store, meeting_id
        lay = QtWidgets.QVBoxLayout(self); lay.setContentsMargins(12,12,12,12); lay.setSpacing(12)

        header = QtWidgets.QGroupBox("Meeting")
        g = QtWidgets.QGridLayout(header)
        self.ed_title = QtWidgets.QLineEdit(); self.ed_client = QtWidgets.QLineEdit()
        self.ed_date = QtWidgets.QDateEdit(); self.ed_date.setCalendarPopup(True); self.ed_date.setDisplayFormat("yyyy-MM-dd")
        g.addWidget(QtWidgets.QLabel("Title:"), 0,0); g.addWidget(self.ed_title, 0,1,1,3)
        g.addWidget(QtWidgets.QLabel("Client:"), 1,0); g.addWidget(self.ed_client, 1,1)
        g.addWidget(QtWidgets.QLabel("Date:"), 1,2); g.addWidget(self.ed_date, 1,3)
        self.counts = QtWidgets.QLabel(); g.addWidget(self.counts, 2,0,1,4)
        lay.addWidget(header)

        self.table = QtWidgets.QTableWidget(0, len(ISSUE_COLUMNS)); self.table.setHorizontalHeaderLabels(ISSUE_COLUMNS)
        self.table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.horizontalHeader().setSectionResizeMode(0, QtWidgets.QHeaderView.ResizeMode.Stretch)
        self.table.doubleClicked.connect(self.edit_issue)
        lay.addWidget(self.table, 1)

        controls = QtWidgets.QHBoxLayout()
        self.btn_add = QtWidgets.QPushButton("+ Add Issue"); self.btn_edit = QtWidgets.QPushButton("Edit Issue"); self.btn_del = QtWidgets.QPushButton("Delete Issue")
        controls.addWidget(self.btn_add); controls.addStretch(1); controls.addWidget(self.btn_edit); controls.addWidget(self.btn_del)
        lay.addLayout(controls)

        self.btn_add.clicked.connect(self.add_issue); self.btn_edit.clicked.connect(self.edit_issue); self.btn_del.clicked.connect(self.delete_issue)
        for w in (self.ed_title, self.ed_client): w.editingFinished.connect(self.save_header)
        self.ed_date.dateChanged.connect(self.save_header)
        self.refresh(store.state)

    def meeting(self):
        return self.store.state.data.find_meeting(self.meeting_id)

    def refresh(self, state: AppState):
        m = state.data.find_meeting(self.meeting_id)
        if not m: self.setDisabled(True); return
        _set_text(self.ed_title, m.title); _set_text(self.ed_client, m.client)
        qd = QtCore.QDate.fromString(m.date, "yyyy-MM-dd")
        if qd.isValid() and qd != self.ed_date.date():
            self.ed_date.blockSignals(True); self.ed_date.setDate(qd); self.ed_date.blockSignals(False)
        counts = meeting_status_counts(m)
        self.counts.setText("  ".join(f"{k}: {v}" for k, v in counts.items()))
        self.table.setRowCount(len(m.issues))
        for row, it in enumerate(m.issues):
            for col, val in enumerate([it.topic, it.status, it.priority, it.assignee, it.solution]):
                cell = QtWidgets.QTableWidgetItem(val); cell.setData(QtCore.Qt.ItemDataRole.UserRole, it.id)
                self.table.setItem(row, col, cell)

    def save_header(self):
        m = self.meeting()
        if not m: return
        try:
            updated = validate_meeting(replace(m, title=self.ed_title.text(), client=self.ed_client.text(),
                                               date=self.ed_date.date().toString("yyyy-MM-dd")))
        except ValidationError as e:
            QtWidgets.QMessageBox.warning(self, "Invalid meeting", str(e)); self.refresh(self.store.state); return
        if updated != m:
            self.store.dispatch(UpdateMeeting(updated))

    def _selected_issue(self):
        m = self.meeting(); row = self.table.currentRow()
        if not m or row < 0 or row >= len(m.issues): return None
        return m.issues[row]

    def add_issue(self):
        self._run_issue_dialog(None)

    def edit_issue(self, *_):
        it = self._selected_issue()
        if it: self._run_issue_dialog(it)

    def _run_issue_dialog(self, base: Issue | None):
        dlg = IssueDialog(base, self)
        while dlg.exec():
            try:
                issue = dlg.issue()
            except ValidationError as e:
                QtWidgets.QMessageBox.warning(self, "Invalid issue", str(e)); continue
            self.store.dispatch(AddIssue(self.meeting_id, issue) if base is None else UpdateIssue(self.meeting_id, issue))
            return

    def delete_issue(self):
        it = self._selected_issue()
        if it and _confirm(self, "Delete Issue", f"Delete issue '{it.topic}'?"):
            self.store.dispatch(DeleteIssue(self.meeting_id, it.id))


class QuickNotesPage(QtWidgets.QWidget):
    def __init__(self, store: MeetingStore, parent=None):
        super().__init__(parent); self.store = store
        lay = QtWidgets.QVBoxLayout(self); lay.setContentsMargins(12,12,12,12)
        self.list = QtWidgets.QListWidget(); self.list.itemDoubleClicked.connect(self.edit_note)
        lay.addWidget(self.list, 1)
        controls = QtWidgets.QHBoxLayout()
        self.btn_add = QtWidgets.QPushButton("+ Add Note"); self.btn_edit = QtWidgets.QPushButton("Edit Note"); self.btn_del = QtWidgets.QPushButton("Delete Note")
        controls.addWidget(self.btn_add); controls.addStretch(1); controls.addWidget(self.btn_edit); controls.addWidget(self.btn_del)
        lay.addLayout(controls)
        self.btn_add.clicked.connect(self.add_note); self.btn_edit.clicked.connect(self.edit_note); self.btn_del.clicked.connect(self.delete_note)

    def refresh(self, state: AppState):
        self.list.clear()
        for n in sort_notes_newest_first(state.quick_notes):
            heading = f"{n.title} — " if n.title else ""
            item = QtWidgets.QListWidgetItem(f"{n.created_at[:16].replace('T', ' ')}  {heading}{n.content}")
            item.setData(QtCore.Qt.ItemDataRole.UserRole, n.id)
            self.list.addItem(item)

    def _selected(self) -> QuickNote | None:
        item = self.list.currentItem()
        if not item: return None
        note_id = item.data(QtCore.Qt.ItemDataRole.UserRole)
        return next((n for n in self.store.state.quick_notes if n.id == note_id), None)

    def _run_dialog(self, base: QuickNote | None):
        dlg = QuickNoteDialog(base, self)
        while dlg.exec():
            try:
                note = dlg.note()
            except ValidationError as e:
                QtWidgets.QMessageBox.warning(self, "Invalid note", str(e)); continue
            self.store.dispatch(AddQuickNote(note) if base is None else UpdateQuickNote(note))
            return

    def add_note(self):
        self._run_dialog(None)

    def edit_note(self, *_):
        n = self._selected()
        if n: self._run_dialog(n)

    def delete_note(self):
        n = self._selected()
        if n and _confirm(self, "Delete Note", "Delete this note?"):
            self.store.dispatch(DeleteQuickNote(n.id))
