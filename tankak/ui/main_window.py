from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from tankak.core.layout import layout_for_language
from tankak.core.lessons import LEVELS, Lesson, LessonRepository
from tankak.core.metrics import TypingMetrics, format_time
from tankak.core.practice import LessonResult, PracticeController, PracticeMode
from tankak.core.progress import ProgressStore, ProgressTracker
from tankak.ui.colors import PracticeColors, accuracy_color, render_target_html
from tankak.ui.keys import key_event_args
from tankak.ui.timer import QtCountdownDriver

logger = logging.getLogger(__name__)

MODE_LABELS = {
    PracticeMode.LESSON: "Lesson",
    PracticeMode.ONE_MINUTE: "1 min test",
    PracticeMode.THREE_MINUTES: "3 min test",
    PracticeMode.FIVE_MINUTES: "5 min test",
}


class PracticeWindow(QMainWindow):
    """Typing practice screen: lesson picker, target text, input box, live stats."""

    def __init__(self, lessons: LessonRepository, progress_store: ProgressStore) -> None:
        super().__init__()
        self._lessons_repo = lessons
        self._progress_store = progress_store
        self._language = lessons.languages()[0]
        self._level = LEVELS[0]
        self._mode = PracticeMode.LESSON
        self._lesson_index = 0
        self._trackers: Dict[str, ProgressTracker] = {}

        self._controller = self._new_controller()
        self._countdown = QtCountdownDriver(self._controller, self)
        self._countdown.ticked.connect(lambda _remaining: self._update_stats())
        self._countdown.finished.connect(self._show_result)

        self._stats_timer = QTimer(self)
        self._stats_timer.setInterval(1000)
        self._stats_timer.timeout.connect(self._update_stats)

        self.setWindowTitle("Tankak")
        self._build_ui()
        self._load_lesson()

    # ------------------------------------------------------------------ setup

    def _build_ui(self) -> None:
        root = QWidget()
        root.setStyleSheet(f"background: {PracticeColors.BG}; color: {PracticeColors.TEXT_PRIMARY};")
        layout = QVBoxLayout(root)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        pickers = QHBoxLayout()
        self.language_box = QComboBox()
        for language in self._lessons_repo.languages():
            self.language_box.addItem(language.title(), language)
        self.language_box.currentIndexChanged.connect(self._on_language_changed)
        self.level_box = QComboBox()
        for level in LEVELS:
            self.level_box.addItem(level.title(), level)
        self.level_box.currentIndexChanged.connect(self._on_level_changed)
        self.mode_box = QComboBox()
        for mode, label in MODE_LABELS.items():
            self.mode_box.addItem(label, mode)
        self.mode_box.currentIndexChanged.connect(self._on_mode_changed)
        for widget in (self.language_box, self.level_box, self.mode_box):
            pickers.addWidget(widget)
        pickers.addStretch(1)
        layout.addLayout(pickers)

        self.lesson_title = QLabel()
        self.lesson_title.setStyleSheet(f"font-size: 20px; font-weight: 600; color: {PracticeColors.PRIMARY_DARK};")
        self.requirements = QLabel()
        self.requirements.setStyleSheet(f"color: {PracticeColors.TEXT_MUTED};")
        layout.addWidget(self.lesson_title)
        layout.addWidget(self.requirements)

        card = QFrame()
        card.setStyleSheet(
            f"QFrame {{ background: {PracticeColors.CARD_BG}; border: 1px solid {PracticeColors.CARD_BORDER};"
            " border-radius: 12px; }"
        )
        card_layout = QVBoxLayout(card)
        self.target_label = QLabel()
        self.target_label.setTextFormat(Qt.TextFormat.RichText)
        self.target_label.setWordWrap(True)
        self.target_label.setStyleSheet("font-size: 24px; border: none;")
        card_layout.addWidget(self.target_label)
        layout.addWidget(card)

        self.input_box = QLineEdit()
        self.input_box.setPlaceholderText("Start typing to begin")
        self.input_box.setContextMenuPolicy(Qt.ContextMenuPolicy.NoContextMenu)
        self.input_box.setStyleSheet("font-size: 22px; padding: 8px;")
        self.input_box.installEventFilter(self)
        layout.addWidget(self.input_box)

        self.warning_label = QLabel()
        self.warning_label.setStyleSheet(f"color: {PracticeColors.INCORRECT};")
        layout.addWidget(self.warning_label)

        stats = QGridLayout()
        self._stat_values = {}
        for column, (key, label) in enumerate(
            (("wpm", "WPM"), ("accuracy", "Accuracy"), ("errors", "Errors"), ("time", "Time"), ("cps", "Chars/sec"))
        ):
            header = QLabel(label)
            header.setStyleSheet(f"color: {PracticeColors.TEXT_MUTED};")
            value = QLabel("0")
            value.setStyleSheet(f"font-size: 26px; font-weight: 700; color: {PracticeColors.PRIMARY};")
            stats.addWidget(header, 0, column)
            stats.addWidget(value, 1, column)
            self._stat_values[key] = value
        layout.addLayout(stats)

        self.result_label = QLabel()
        self.result_label.setWordWrap(True)
        layout.addWidget(self.result_label)

        buttons = QHBoxLayout()
        self.prev_button = QPushButton("Previous")
        self.prev_button.clicked.connect(lambda: self._step_lesson(-1))
        self.restart_button = QPushButton("Start over")
        self.restart_button.clicked.connect(self._restart)
        self.next_button = QPushButton("Next")
        self.next_button.clicked.connect(lambda: self._step_lesson(1))
        for button in (self.prev_button, self.restart_button, self.next_button):
            buttons.addWidget(button)
        buttons.addStretch(1)
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setFormat("Level progress %p%")
        buttons.addWidget(self.progress_bar, 1)
        layout.addLayout(buttons)

        layout.addStretch(1)
        self.setCentralWidget(root)

    # ---------------------------------------------------------------- lessons

    def _new_controller(self) -> PracticeController:
        return PracticeController(
            self._lessons_repo.by_language(self._language)[0],
            mode=self._mode,
            tracker=self._tracker_for(self._language),
            layout=layout_for_language(self._language),
        )

    def _tracker_for(self, language: str) -> ProgressTracker:
        if language not in self._trackers:
            self._trackers[language] = self._progress_store.load_tracker(language)
        return self._trackers[language]

    def _current_lessons(self) -> List[Lesson]:
        if self._mode.is_timed:
            return self._lessons_repo.by_language(self._language)
        return self._lessons_repo.by_language_and_level(self._language, self._level)

    def _load_lesson(self) -> None:
        lessons = self._current_lessons()
        if not lessons:
            logger.warning("No %s lessons for level %s", self._language, self._level)
            self.target_label.setText("No lessons available for this selection.")
            self.input_box.setEnabled(False)
            return
        self.input_box.setEnabled(True)
        self._lesson_index = max(0, min(self._lesson_index, len(lessons) - 1))
        lesson = lessons[self._lesson_index]
        self._countdown.stop()
        self._stats_timer.stop()
        self._controller.load_lesson(lesson)

        self.lesson_title.setText(f"{lesson.title}  ({self._lesson_index + 1} / {len(lessons)})")
        self.requirements.setText(f"Pass requirements: min {lesson.min_wpm} WPM, min {lesson.min_accuracy}% accuracy")
        self.prev_button.setEnabled(self._lesson_index > 0)
        self.next_button.setEnabled(self._lesson_index < len(lessons) - 1)
        self._refresh()

    def _step_lesson(self, delta: int) -> None:
        self._lesson_index += delta
        self._load_lesson()

    def _restart(self) -> None:
        self._countdown.stop()
        self._stats_timer.stop()
        self._controller.reset()
        self._refresh()

    def _on_language_changed(self, index: int) -> None:
        self._language = self.language_box.itemData(index)
        self._controller = self._new_controller()
        self._countdown.set_controller(self._controller)
        self.level_box.setCurrentIndex(0)
        self._lesson_index = 0
        self._load_lesson()

    def _on_level_changed(self, index: int) -> None:
        self._level = self.level_box.itemData(index)
        self._lesson_index = 0
        self._load_lesson()

    def _on_mode_changed(self, index: int) -> None:
        self._mode = self.mode_box.itemData(index)
        self._controller.set_mode(self._mode)
        self.level_box.setEnabled(not self._mode.is_timed)
        self._lesson_index = 0
        self._load_lesson()

    # ------------------------------------------------------------------ input

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.input_box and event.type() == QEvent.Type.KeyPress:
            return self._on_key_press(event)
        return super().eventFilter(obj, event)

    def _on_key_press(self, event: QKeyEvent) -> bool:
        """Feed one key press to the controller; the line edit never edits itself."""
        if event.modifiers() & (Qt.KeyboardModifier.ControlModifier | Qt.KeyboardModifier.MetaModifier):
            # swallow shortcuts such as paste
            return True
        key, shift, code = key_event_args(event)
        if not key:
            return True
        was_active = self._controller.is_active
        outcome = self._controller.handle_key(key, shift, code)
        self.warning_label.setText(outcome.warning)
        if not was_active and self._controller.is_active:
            self._stats_timer.start()
            self._countdown.start()
        if outcome.result is not None:
            self._show_result(outcome.result)
        else:
            self._refresh()
        return True

    # ---------------------------------------------------------------- display

    def _refresh(self) -> None:
        self.input_box.setText(self._controller.typed_text)
        self.target_label.setText(render_target_html(self._controller.target_text, self._controller.typed_text))
        if self._controller.result is None:
            self.result_label.setText("")
        self._update_stats()
        lessons = self._current_lessons()
        self.progress_bar.setValue(
            self._controller.tracker.get_progress_percentage(len(lessons), [lesson.key for lesson in lessons])
        )

    def _update_stats(self) -> None:
        metrics: TypingMetrics = self._controller.current_metrics()
        self._stat_values["wpm"].setText(str(metrics.wpm))
        self._stat_values["accuracy"].setText(f"{metrics.accuracy}%")
        self._stat_values["accuracy"].setStyleSheet(
            f"font-size: 26px; font-weight: 700; color: {accuracy_color(metrics.accuracy)};"
        )
        self._stat_values["errors"].setText(str(metrics.errors))
        if self._controller.mode.is_timed:
            self._stat_values["time"].setText(format_time(self._controller.timer.time_remaining))
        else:
            self._stat_values["time"].setText(format_time(metrics.elapsed_time))
        self._stat_values["cps"].setText(f"{metrics.characters_per_second:.2f}")

    def _show_result(self, result: Optional[LessonResult]) -> None:
        self._stats_timer.stop()
        self._countdown.stop()
        self._refresh()
        if result is None:
            return
        if result.passed:
            headline = f'<b style="color:{PracticeColors.PASS}">You passed this lesson!</b>'
        else:
            headline = f'<b style="color:{PracticeColors.FAIL}">Keep practicing to reach the target.</b>'
        tips = "<br>".join(f"• {tip}" for tip in result.suggestions)
        self.result_label.setText(f"{headline}<br>{tips}")
        self._progress_store.save_tracker(self._language, self._controller.tracker)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._countdown.stop()
        self._stats_timer.stop()
        for language, tracker in self._trackers.items():
            self._progress_store.save_tracker(language, tracker)
        super().closeEvent(event)
