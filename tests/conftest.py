import logging
import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'

import pytest

from simulation import FrameContext, MotionRule


class RecordingRenderer:
    """Keeps every renderer call in order."""
    def __init__(self):
        self.calls = []

    def clear(self, color):
        self.calls.append(('clear', color))

    def draw_point(self, size, position, color):
        self.calls.append(('draw', size, position, color))

    def draws(self):
        return [c for c in self.calls if c[0] == 'draw']


class ManualScheduler:
    """Frame scheduler whose callbacks only run when the test says so."""
    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next_id = 0

    def request_frame(self, callback):
        self._next_id += 1
        self.pending[self._next_id] = callback
        return self._next_id

    def cancel_frame(self, frame_id):
        self.cancelled.append(frame_id)
        self.pending.pop(frame_id, None)

    def fire(self):
        frame_id = min(self.pending)
        callback = self.pending.pop(frame_id)
        callback()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def linear_context():
    return FrameContext(motion=MotionRule.LINEAR_FOLLOW, width=200, height=100)


@pytest.fixture
def orbital_context():
    return FrameContext(motion=MotionRule.ORBITAL_FOLLOW, width=200, height=100)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
