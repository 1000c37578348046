# -*- coding: utf-8 -*-
import logging

from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QPushButton, QTableWidget, QTableWidgetItem,
    QHeaderView, QSpinBox, QLineEdit, QMessageBox
)
from PyQt5.QtCore import Qt, pyqtSignal

from .alarm_store import AlarmDefinition

logger = logging.getLogger(__name__)

COL_ID, COL_HOUR, COL_MINUTE, COL_WINDOW, COL_TEXT = range(5)
MAX_WINDOW_MINUTES = 1439

# --- Alarm Settings Window ---

class AlarmSettingsWindow(QDialog):
    """Editable alarm table. ``save_alarms`` gets the full list and returns success."""
    closed = pyqtSignal()

    def __init__(self, alarms, save_alarms, parent=None):
        super().__init__(parent)
        self.setWindowTitle("アラーム設定")
        self.resize(720, 520)
        self.save_alarms = save_alarms

        self.layout = QVBoxLayout(self)

        self.alarm_table = QTableWidget()
        self.alarm_table.setColumnCount(5)
        self.alarm_table.setHorizontalHeaderLabels(["ID", "時", "分", "ランダム幅 (±分)", "表示テキスト"])
        self.alarm_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        self.alarm_table.horizontalHeader().setSectionResizeMode(COL_TEXT, QHeaderView.Stretch)
        self.alarm_table.setSelectionBehavior(QTableWidget.SelectRows); self.alarm_table.setSelectionMode(QTableWidget.SingleSelection)
        self.layout.addWidget(self.alarm_table)

        # Buttons
        self.button_layout = QHBoxLayout()
        self.add_button = QPushButton("追加", clicked=self.add_row)
        self.remove_button = QPushButton("選択行を削除", clicked=self.remove_selected_row)
        self.save_button = QPushButton("保存", clicked=self.save)
        self.close_button = QPushButton("閉じる", clicked=self.close)
        self.button_layout.addWidget(self.add_button); self.button_layout.addWidget(self.remove_button)
        self.button_layout.addStretch(1)
        self.button_layout.addWidget(self.save_button); self.button_layout.addWidget(self.close_button)
        self.layout.addLayout(self.button_layout)

        self.populate(alarms)

    def populate(self, alarms):
        self.alarm_table.setRowCount(0)
        for alarm in alarms:
            self._append_row(alarm)

    def _append_row(self, alarm):
        row = self.alarm_table.rowCount()
        self.alarm_table.insertRow(row)
        id_item = QTableWidgetItem(str(alarm.id))
        id_item.setFlags(id_item.flags() & ~Qt.ItemIsEditable)
        self.alarm_table.setItem(row, COL_ID, id_item)
        self.alarm_table.setCellWidget(row, COL_HOUR, self._spinbox(0, 23, alarm.hour))
        self.alarm_table.setCellWidget(row, COL_MINUTE, self._spinbox(0, 59, alarm.minute))
        # Never lower a stored window just by opening and saving
        max_window = max(MAX_WINDOW_MINUTES, alarm.window_minutes)
        self.alarm_table.setCellWidget(row, COL_WINDOW, self._spinbox(0, max_window, alarm.window_minutes))
        self.alarm_table.setCellWidget(row, COL_TEXT, QLineEdit(alarm.text))

    def _spinbox(self, low, high, value):
        spinbox = QSpinBox(); spinbox.setRange(low, high)
        spinbox.setValue(value)
        return spinbox

    def next_free_id(self):
        ids = [int(self.alarm_table.item(row, COL_ID).text()) for row in range(self.alarm_table.rowCount())]
        return max(ids, default=0) + 1

    def add_row(self):
        self._append_row(AlarmDefinition(self.next_free_id(), 9, 0, 5, ''))
        self.alarm_table.scrollToBottom()

    def remove_selected_row(self):
        selected_rows = self.alarm_table.selectionModel().selectedRows()
        if not selected_rows: QMessageBox.warning(self, "選択なし", "削除する行を選択してください。"); return
        self.alarm_table.removeRow(selected_rows[0].row())

    def collect_alarms(self):
        alarms = []
        for row in range(self.alarm_table.rowCount()):
            alarms.append(AlarmDefinition(
                int(self.alarm_table.item(row, COL_ID).text()),
                self.alarm_table.cellWidget(row, COL_HOUR).value(),
                self.alarm_table.cellWidget(row, COL_MINUTE).value(),
                self.alarm_table.cellWidget(row, COL_WINDOW).value(),
                self.alarm_table.cellWidget(row, COL_TEXT).text(),
            ))
        return alarms

    def save(self):
        alarms = self.collect_alarms()
        if self.save_alarms(alarms):
            logger.info("Alarm settings saved (%d alarms).", len(alarms))
        else:
            QMessageBox.warning(self, "保存エラー", "アラーム設定を保存できませんでした。")

    def done(self, result):
        # Close button, window close and Escape all end up here
        super().done(result)
        self.closed.emit()
