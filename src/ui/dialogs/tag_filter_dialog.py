from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QListWidget, QListWidgetItem, QPushButton, QHBoxLayout
)


class TagFilterDialog(QDialog):
    def __init__(self, tags: list[str], selected: list[str], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Select Tags")
        self.resize(360, 420)

        layout = QVBoxLayout(self)

        self.list_widget = QListWidget()
        layout.addWidget(self.list_widget)

        chosen = set(selected)
        for tag in tags:
            item = QListWidgetItem(tag)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Checked if tag in chosen else Qt.Unchecked)
            self.list_widget.addItem(item)

        btn_layout = QHBoxLayout()
        self.clear_btn = QPushButton("Clear")
        self.apply_btn = QPushButton("Apply Filters")
        self.apply_btn.setDefault(True)
        btn_layout.addWidget(self.clear_btn)
        btn_layout.addStretch(1)
        btn_layout.addWidget(self.apply_btn)
        layout.addLayout(btn_layout)

        self.clear_btn.clicked.connect(self.clear)
        self.apply_btn.clicked.connect(self.accept)

    def clear(self):
        for i in range(self.list_widget.count()):
            self.list_widget.item(i).setCheckState(Qt.Unchecked)
        self.accept()

    def selected_tags(self) -> list[str]:
        return [
            self.list_widget.item(i).text()
            for i in range(self.list_widget.count())
            if self.list_widget.item(i).checkState() == Qt.Checked
        ]
