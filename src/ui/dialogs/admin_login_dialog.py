from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QLabel,
    QDialogButtonBox
)

from core.admin_gate import AdminGate


class AdminLoginDialog(QDialog):
    def __init__(self, gate: AdminGate, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Admin Login")
        self.setModal(True)
        self.resize(360, 160)
        self.gate = gate

        layout = QVBoxLayout(self)

        form = QFormLayout()
        self.user_edit = QLineEdit()
        self.pass_edit = QLineEdit()
        self.pass_edit.setEchoMode(QLineEdit.EchoMode.Password)
        form.addRow("User", self.user_edit)
        form.addRow("Password", self.pass_edit)
        layout.addLayout(form)

        self.error = QLabel()
        self.error.setStyleSheet("color: #ef4444;")
        self.error.setWordWrap(True)
        self.error.setVisible(False)
        layout.addWidget(self.error)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._try_login)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        if not gate.configured:
            self._show_error("Admin access is not configured. Set SONGBOOK_ADMIN_USER and SONGBOOK_ADMIN_PASS.")
            buttons.button(QDialogButtonBox.Ok).setEnabled(False)

    def _show_error(self, text: str):
        self.error.setText(text)
        self.error.setVisible(True)

    def _try_login(self):
        if self.gate.check(self.user_edit.text(), self.pass_edit.text()):
            self.accept()
            return
        self.pass_edit.clear()
        self._show_error("Invalid credentials")
