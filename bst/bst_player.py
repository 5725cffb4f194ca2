from typing import List, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from bst.bst_model import TreeState
from bst.bst_recorder import Step
from bst.bst_settings import BASE_STEP_MS
from core.global_ctrl import GlobalController


class StepPlayer(QObject):
    """
    Walks through an already computed trace, either on demand or driven by a
    timer whose interval follows the global speed.

    In step mode every automatic advance pauses playback again, so the user
    confirms each step.
    """

    stepChanged = pyqtSignal(int)
    playingChanged = pyqtSignal(bool)
    finished = pyqtSignal()

    def __init__(self, global_ctrl: Optional[GlobalController] = None, parent=None):
        super().__init__(parent)
        self.global_ctrl = global_ctrl or GlobalController()
        self._steps: List[Step] = []
        self._index = 0
        self._playing = False
        self._step_mode = False
        self._fallback_tree: Optional[TreeState] = None

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)
        self.global_ctrl.speedChanged.connect(self._on_speed_changed)

    # ---------- State ----------

    @property
    def steps(self) -> List[Step]:
        return self._steps

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def step_mode(self) -> bool:
        return self._step_mode

    def current_step(self) -> Optional[Step]:
        if not self._steps:
            return None
        return self._steps[self._index]

    def visualized_tree(self) -> Optional[TreeState]:
        """The snapshot of the current step, or the loaded tree when idle."""
        step = self.current_step()
        if step is None:
            return self._fallback_tree
        return step.tree_snapshot

    def interval(self) -> int:
        return self.global_ctrl.scale_duration(BASE_STEP_MS)

    # ---------- Loading ----------

    def load(self, steps, tree: Optional[TreeState] = None):
        self._set_playing(False)
        self._steps = list(steps)
        self._index = 0
        self._fallback_tree = tree
        self.stepChanged.emit(self._index)

    def clear(self, tree: Optional[TreeState] = None):
        self.load([], tree)

    # ---------- Navigation ----------

    def step_next(self) -> int:
        if not self._steps:
            return self._index
        if self._index >= len(self._steps) - 1:
            self._index = len(self._steps) - 1
            self._set_playing(False)
            self.finished.emit()
            return self._index
        self._index += 1
        if self._step_mode:
            self._set_playing(False)
        self.stepChanged.emit(self._index)
        return self._index

    def step_prev(self) -> int:
        if not self._steps:
            return self._index
        self._set_playing(False)
        if self._index > 0:
            self._index -= 1
            self.stepChanged.emit(self._index)
        return self._index

    def set_step_index(self, index: int) -> int:
        self._set_playing(False)
        if not self._steps:
            self._index = 0
            return self._index
        index = min(max(0, index), len(self._steps) - 1)
        if index != self._index:
            self._index = index
            self.stepChanged.emit(self._index)
        return self._index

    def set_step_mode(self, enabled: bool):
        self._step_mode = bool(enabled)

    # ---------- Playback ----------

    def play(self):
        if not self._steps:
            return
        self._set_playing(True)

    def pause(self):
        self._set_playing(False)

    def toggle(self):
        if self._playing:
            self.pause()
        else:
            self.play()

    def _set_playing(self, playing: bool):
        if playing:
            self._timer.start(self.interval())
        else:
            self._timer.stop()
        if playing != self._playing:
            self._playing = playing
            self.playingChanged.emit(playing)

    def _on_tick(self):
        self.step_next()

    def _on_speed_changed(self, _speed):
        if self._playing:
            self._timer.start(self.interval())
