from PyQt5.QtCore import QObject, pyqtSignal

from bst.bst_settings import MAX_SPEED, MIN_SPEED


class GlobalController(QObject):
    """Playback speed shared by every StepPlayer."""

    speedChanged = pyqtSignal(float)

    def __init__(self, speed: float = 1.0):
        super().__init__()
        self._speed = self._clamp(speed)

    @staticmethod
    def _clamp(value: float) -> float:
        return max(MIN_SPEED, min(MAX_SPEED, value))

    @property
    def speed(self) -> float:
        return self._speed

    def set_speed(self, value: float):
        value = self._clamp(value)
        # ignore slider jitter
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            self.speedChanged.emit(self._speed)

    def scale_duration(self, base_ms: int) -> int:
        """Step interval in ms for `base_ms` at the current speed, at least 1."""
        return max(1, int(base_ms / self._speed))
