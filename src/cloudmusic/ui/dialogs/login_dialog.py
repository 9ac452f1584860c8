from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QLineEdit, QPushButton, QHBoxLayout, QLabel, QMessageBox
)


class LoginDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Log in")
        self.resize(360, 160)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Phone number or e-mail"))

        self.username = QLineEdit()
        layout.addWidget(self.username)

        layout.addWidget(QLabel("Password"))
        self.password = QLineEdit()
        self.password.setEchoMode(QLineEdit.EchoMode.Password)
        layout.addWidget(self.password)

        btn_layout = QHBoxLayout()
        self.cancel_btn = QPushButton("Cancel")
        self.login_btn = QPushButton("Log in")
        self.login_btn.setDefault(True)
        btn_layout.addStretch(1)
        btn_layout.addWidget(self.cancel_btn)
        btn_layout.addWidget(self.login_btn)
        layout.addLayout(btn_layout)

        self.cancel_btn.clicked.connect(self.reject)
        self.login_btn.clicked.connect(self.submit)

    def credentials(self) -> tuple[str, str]:
        return self.username.text().strip(), self.password.text()

    def submit(self):
        username, password = self.credentials()
        if not username or not password:
            QMessageBox.warning(self, "Log in", "Please enter both account and password.")
            return
        self.accept()
