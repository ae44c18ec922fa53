"""Drives a practice countdown from a one-second QTimer."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from tankak.core.practice import LessonResult, PracticeController


class QtCountdownDriver(QObject):
    """Calls :meth:`PracticeController.tick` every second while the countdown runs.

    The QTimer is stopped as soon as the countdown is no longer active, so no
    callback outlives the attempt it belongs to.
    """

    ticked = Signal(int)  # seconds remaining
    finished = Signal(object)  # LessonResult

    def __init__(self, controller: PracticeController, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._timer = QTimer(self)
        self._timer.setInterval(1000)
        self._timer.timeout.connect(self._on_timeout)

    def set_controller(self, controller: PracticeController) -> None:
        self.stop()
        self._controller = controller

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if self._controller.timer.is_active and not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def _on_timeout(self) -> None:
        result: Optional[LessonResult] = self._controller.tick()
        self.ticked.emit(self._controller.timer.time_remaining)
        if not self._controller.timer.is_active:
            self._timer.stop()
        if result is not None:
            self.finished.emit(result)
