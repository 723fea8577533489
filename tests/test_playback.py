"""Tests for lottiekit.playback, driven by a fake clock."""

import pytest

from lottiekit.playback import PlaybackEngine, PlaybackState


@pytest.fixture
def updates():
    return []


@pytest.fixture
def engine(updates, clock):
    return PlaybackEngine(updates.append, fps=30, duration=2.0, clock=clock)


class TestTransport:
    def test_initial_state(self, engine):
        assert engine.state is PlaybackState.STOPPED
        assert engine.current_time == 0
        assert not engine.is_playing

    def test_play_ticks_immediately(self, engine, updates):
        engine.play()
        assert engine.is_playing
        assert updates == [0.0]

    def test_tick_advances_by_elapsed_time(self, engine, clock):
        engine.play()
        clock.advance(0.5)
        engine.tick()
        assert engine.current_time == pytest.approx(0.5)
        assert engine.current_frame == 15

    def test_end_pauses(self, engine, clock, updates):
        engine.play()
        clock.advance(5.0)
        engine.tick()
        assert engine.current_time == 2.0
        assert engine.state is PlaybackState.PAUSED
        assert updates[-1] == 2.0
        # at the end, play does nothing
        engine.play()
        assert not engine.is_playing

    def test_loop_wraps(self, updates, clock):
        engine = PlaybackEngine(updates.append, duration=2.0, loop=True, clock=clock)
        engine.play()
        clock.advance(2.5)
        engine.tick()
        assert engine.is_playing
        assert engine.current_time == pytest.approx(0.5)

    def test_pause_and_resume_skip_paused_time(self, engine, clock):
        engine.play()
        clock.advance(0.5)
        engine.tick()
        engine.pause()
        assert engine.state is PlaybackState.PAUSED
        clock.advance(10)
        engine.tick()
        engine.play()
        assert engine.current_time == pytest.approx(0.5)

    def test_stop_rewinds(self, engine, clock, updates):
        engine.play()
        clock.advance(1.0)
        engine.tick()
        engine.stop()
        assert engine.state is PlaybackState.STOPPED
        assert engine.current_time == 0
        assert updates[-1] == 0

    def test_zero_duration_never_plays(self, updates, clock):
        engine = PlaybackEngine(updates.append, duration=0, clock=clock)
        engine.play()
        assert not engine.is_playing
        assert updates == []

    def test_duration_cut_to_zero_while_looping(self, updates, clock):
        engine = PlaybackEngine(updates.append, duration=2.0, loop=True, clock=clock)
        engine.play()
        clock.advance(0.5)
        engine.tick()
        engine.set_duration(0)
        clock.advance(0.1)
        engine.tick()
        assert engine.current_time == 0
        assert engine.state is PlaybackState.PAUSED
        assert updates[-1] == 0

    def test_play_twice_is_noop(self, engine, updates):
        engine.play()
        engine.play()
        assert updates == [0.0]


class TestSeeking:
    def test_seek_clamps(self, engine, updates):
        engine.seek(-1)
        assert engine.current_time == 0
        engine.seek(10)
        assert engine.current_time == 2.0
        assert updates == [0.0, 2.0]

    def test_step(self, updates, clock):
        engine = PlaybackEngine(updates.append, fps=10, duration=1.0, clock=clock)
        engine.step_forward()
        assert engine.current_time == pytest.approx(0.1)
        engine.step_backward()
        engine.step_backward()
        assert engine.current_time == 0

    def test_set_duration_pulls_time_back(self, engine, updates):
        engine.seek(1.5)
        engine.set_duration(1.0)
        assert engine.current_time == 1.0
        assert updates[-1] == 1.0

    def test_set_duration_longer_keeps_time(self, engine, updates):
        engine.seek(1.5)
        engine.set_duration(4.0)
        assert engine.current_time == 1.5
        assert updates == [1.5]

    def test_settings(self, engine):
        engine.set_fps(60)
        engine.set_loop(True)
        engine.seek(0.5)
        assert engine.current_frame == 30
        assert engine.loop

    def test_zero_fps_defaults(self, updates):
        assert PlaybackEngine(updates.append, fps=0).fps == 30


class TestScheduler:
    def test_reschedules_and_cancels(self, updates, clock):
        scheduled = []
        cancelled = []

        def scheduler(callback):
            scheduled.append(callback)
            return len(scheduled)

        engine = PlaybackEngine(
            updates.append, duration=2.0, clock=clock,
            scheduler=scheduler, cancel=cancelled.append,
        )
        engine.play()
        assert scheduled == [engine.tick]
        clock.advance(0.1)
        scheduled[-1]()
        assert len(scheduled) == 2
        engine.pause()
        assert cancelled == [2]

    def test_no_reschedule_after_end(self, updates, clock):
        scheduled = []
        engine = PlaybackEngine(
            updates.append, duration=1.0, clock=clock,
            scheduler=lambda cb: scheduled.append(cb) or len(scheduled),
        )
        engine.play()
        clock.advance(2.0)
        engine.tick()
        assert len(scheduled) == 1
        assert engine.state is PlaybackState.PAUSED
