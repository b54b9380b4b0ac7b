"""Timer settings dialog: phase labels and lengths."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)
from pomoflash.core.durations import (
    BREAK_MAX_MINUTES,
    BREAK_PRESETS,
    DEFAULT_BREAK_LABEL,
    DEFAULT_WORK_LABEL,
    WORK_MAX_MINUTES,
    WORK_PRESETS,
    DurationConfig,
    clamp_duration,
)
from pomoflash.util import format_duration


# Modal dialog for editing a DurationConfig. Opened from the Timer menu; the main window reads `chosen_config`
# after it's accepted and resets the clock with it.
class SettingsDialog(QDialog):

    def __init__(self, parent, cfg: DurationConfig):
        super().__init__(parent)
        self.setWindowTitle("Timer Settings")
        self.setModal(True)

        # Output attribute, read by MainWindow after the dialog closes
        self.chosen_config = cfg

        outer = QVBoxLayout(self)
        self._work = self._build_phase_box(outer, "Work Session", cfg.work_label, DEFAULT_WORK_LABEL,
                                           cfg.work_seconds, WORK_PRESETS, WORK_MAX_MINUTES)
        self._break = self._build_phase_box(outer, "Break Session", cfg.break_label, DEFAULT_BREAK_LABEL,
                                            cfg.break_seconds, BREAK_PRESETS, BREAK_MAX_MINUTES)

        note = QLabel("Saving resets the timer and the session count.")
        note.setStyleSheet("color: #888888;")
        outer.addWidget(note)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(cancel_btn)
        save_btn = QPushButton("Save")
        save_btn.setDefault(True)
        save_btn.clicked.connect(self._apply)
        btn_row.addWidget(save_btn)
        outer.addLayout(btn_row)

    # Builds one "label / presets / minutes+seconds" group and returns the widgets we need to read back later.
    def _build_phase_box(self, outer, title, label, default_label, seconds, presets, max_minutes):
        box = QGroupBox(title)
        lay = QVBoxLayout(box)

        row = QHBoxLayout()
        row.addWidget(QLabel("Label:"))
        label_edit = QLineEdit(label)
        label_edit.setPlaceholderText(default_label)
        row.addWidget(label_edit, 1)
        lay.addLayout(row)

        minutes = QSpinBox()
        minutes.setRange(0, max_minutes)
        minutes.setSuffix(" min")
        secs = QSpinBox()
        secs.setRange(0, 59)
        secs.setSuffix(" sec")
        current = QLabel()
        current.setFont(QFont("Monospace"))

        def _set_total(total):
            total = clamp_duration(total, max_minutes)
            minutes.setValue(total // 60)
            secs.setValue(total % 60)

        def _refresh_current():
            current.setText(f"Current: {format_duration(minutes.value() * 60 + secs.value())}")

        preset_row = QHBoxLayout()
        for preset_label, preset_seconds in presets:
            btn = QPushButton(preset_label)
            btn.clicked.connect(lambda _=False, s=preset_seconds: _set_total(s))
            preset_row.addWidget(btn)
        preset_row.addStretch()
        lay.addLayout(preset_row)

        picker_row = QHBoxLayout()
        picker_row.addWidget(minutes)
        picker_row.addWidget(secs)
        lay.addLayout(picker_row)
        current.setAlignment(Qt.AlignRight)
        lay.addWidget(current)

        minutes.valueChanged.connect(_refresh_current)
        secs.valueChanged.connect(_refresh_current)
        _set_total(seconds)
        _refresh_current()

        outer.addWidget(box)
        return label_edit, minutes, secs

    def _apply(self):
        work_label, work_min, work_sec = self._work
        break_label, break_min, break_sec = self._break
        self.chosen_config = DurationConfig(
            work_seconds=work_min.value() * 60 + work_sec.value(),
            break_seconds=break_min.value() * 60 + break_sec.value(),
            work_label=work_label.text().strip(),
            break_label=break_label.text().strip(),
        )
        self.accept()
