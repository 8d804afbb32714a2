import pygame
import pytest

from simulation import FrameContext, MotionRule
from visualization import ClockScheduler, RendererError, Visualizer, to_rgb


@pytest.fixture
def visualizer():
    vis = Visualizer({'window_size': [200, 100]})
    yield vis
    vis.close()


def test_canvas_keeps_vertical_overscan(visualizer):
    assert (visualizer.width, visualizer.height) == (200, 101)
    assert visualizer.screen.get_size() == (200, 101)


def test_ndc_corners_map_to_surface_corners(visualizer):
    assert visualizer.ndc_to_pixel((-1.0, 1.0)) == (0.0, 0.0)
    assert visualizer.ndc_to_pixel((1.0, -1.0)) == (200.0, 101.0)
    assert visualizer.ndc_to_pixel((0.0, 0.0)) == (100.0, 50.5)


def test_clear_and_draw_point(visualizer):
    visualizer.clear((0.0, 0.0, 0.0, 1.0))
    assert visualizer.screen.get_at((100, 50))[:3] == (0, 0, 0)

    visualizer.draw_point(12.0, (0.0, 0.0), (1.0, 0.0, 0.0, 1.0))
    assert visualizer.screen.get_at((100, 50))[:3] == (255, 0, 0)
    assert visualizer.screen.get_at((0, 0))[:3] == (0, 0, 0)


def test_to_rgb_clamps_out_of_range_channels():
    assert to_rgb((0.5, 2.0, -1.0, 1.0)) == (128, 255, 0)


def test_pointer_events_update_the_context(visualizer, monkeypatch):
    context = FrameContext(motion=MotionRule.ORBITAL_FOLLOW, width=200, height=101)
    events = [pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 20), rel=(0, 0), buttons=(0, 0, 0))]
    monkeypatch.setattr(pygame.event, 'get', lambda: events)
    assert visualizer.handle_events(context) is True
    assert context.pointer == (10, 20)

    events = [pygame.event.Event(pygame.WINDOWLEAVE)]
    assert visualizer.handle_events(context) is True
    assert context.pointer is None


@pytest.mark.parametrize('event', [
    pygame.event.Event(pygame.QUIT),
    pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE),
])
def test_quit_and_escape_end_the_run(visualizer, monkeypatch, event):
    context = FrameContext(motion=MotionRule.ORBITAL_FOLLOW, width=200, height=101)
    monkeypatch.setattr(pygame.event, 'get', lambda: [event])
    assert visualizer.handle_events(context) is False


def test_render_target_failure_is_fatal(monkeypatch):
    def broken_set_mode(*args, **kwargs):
        raise pygame.error("no video device")
    monkeypatch.setattr(pygame.display, 'set_mode', broken_set_mode)
    with pytest.raises(RendererError, match="no video device"):
        Visualizer({'window_size': [200, 100]})
    pygame.quit()


class FakeClock:
    def __init__(self):
        self.ticks = []

    def tick(self, fps):
        self.ticks.append(fps)
        return 16


def test_scheduler_runs_the_pending_callback_once():
    clock = FakeClock()
    scheduler = ClockScheduler(fps=30, clock=clock)
    calls = []
    scheduler.request_frame(lambda: calls.append('frame'))

    assert scheduler.run_pending() is True
    assert scheduler.run_pending() is False
    assert calls == ['frame']
    assert clock.ticks == [30, 30]


def test_scheduler_cancel_ignores_stale_ids():
    scheduler = ClockScheduler(clock=FakeClock())
    first = scheduler.request_frame(lambda: None)
    scheduler.cancel_frame(first)
    assert not scheduler.has_pending

    second = scheduler.request_frame(lambda: None)
    scheduler.cancel_frame(first)
    assert scheduler.has_pending
    assert second != first


def test_scheduler_replaces_an_uncancelled_frame(caplog):
    scheduler = ClockScheduler(clock=FakeClock())
    calls = []
    scheduler.request_frame(lambda: calls.append('old'))
    with caplog.at_level('WARNING'):
        scheduler.request_frame(lambda: calls.append('new'))
    scheduler.run_pending()
    assert calls == ['new']
    assert 'still pending' in caplog.text
