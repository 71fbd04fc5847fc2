"""Tests for the frame driver and the input sample it clears."""
import time

import pytest

from constants import WIDTH, HEIGHT
from frame_driver import FrameDriver
from input_state import InputSample
from scene import Phase


class TestFrameDriver:

    def test_tick_uses_timestamp_delta(self, scene, sample):
        driver = FrameDriver(scene, sample, max_dt=0.033, start_time=10.0)
        dt = driver.tick(10.016)
        assert dt == pytest.approx(0.016)
        assert scene.run.dt == pytest.approx(0.016)
        assert scene.run.t == pytest.approx(0.016)
        assert driver.ticks == 1

    def test_default_start_time_reads_clock(self, scene, sample):
        before = time.perf_counter()
        driver = FrameDriver(scene, sample)
        assert before <= driver.last_time <= time.perf_counter()
        assert 0.0 <= driver.tick(time.perf_counter()) <= driver.max_dt

    def test_large_delta_is_clamped(self, scene, sample):
        """A stall never turns into one huge physics step."""
        driver = FrameDriver(scene, sample, max_dt=0.033, start_time=0.0)
        dt = driver.tick(5.0)
        assert dt == 0.033
        assert scene.ambient.bg_t == pytest.approx(0.033)

    def test_clock_going_backwards_is_ignored(self, scene, sample):
        driver = FrameDriver(scene, sample, start_time=5.0)
        assert driver.tick(4.0) == 0.0
        assert scene.run.t == 0.0

    def test_edges_cleared_after_tick(self, scene, sample):
        driver = FrameDriver(scene, sample, start_time=0.0)
        sample.press(50.0, 50.0)
        sample.release(60.0, 60.0)
        driver.step(1 / 60)
        assert not sample.just_pressed
        assert not sample.just_released
        assert scene.phase is Phase.START_FADING

    def test_ambient_time_survives_resets(self, scene, sample):
        driver = FrameDriver(scene, sample, start_time=0.0)
        for _ in range(30):
            driver.step(0.02)
        scene.manual_reset(sample)
        driver.step(0.02)
        assert scene.run.t == pytest.approx(0.02)
        assert scene.ambient.bg_t == pytest.approx(0.62)


class TestInputSample:

    def test_positions_are_clamped(self):
        sample = InputSample()
        sample.move(-10.0, HEIGHT + 50.0)
        assert (sample.x, sample.y) == (0.0, float(HEIGHT))
        sample.press(WIDTH + 1.0, 12.0)
        assert (sample.x, sample.y) == (float(WIDTH), 12.0)

    def test_press_and_release_only_set_edges(self):
        sample = InputSample()
        sample.press(10.0, 10.0)
        assert sample.just_pressed
        assert not sample.held
        sample.release(10.0, 10.0)
        assert sample.just_released
        sample.clear_edges()
        assert not sample.just_pressed
        assert not sample.just_released

    def test_starts_centered(self):
        sample = InputSample()
        assert (sample.x, sample.y) == (WIDTH / 2, HEIGHT / 2)
