"""Tests for the actor's anchor, aim smoothing and nod animation."""
import numpy as np
import pytest

import constants
from actor import Actor, NodPhase, NodSchedule, Pose
from constants import RIM_Y
from terrain import x_left


@pytest.fixture
def actor(rng):
    return Actor(rng)


class TestAnchor:

    def test_anchored_to_left_rim(self, actor):
        assert actor.x == pytest.approx(x_left(float(RIM_Y)) - constants.ACTOR_RIM_OFFSET)
        assert actor.y == RIM_Y - 1

    def test_reset_restores_anchor_and_aim(self, actor):
        anchor = (actor.x, actor.y, actor.aim_x, actor.aim_y)
        actor.x += 30.0
        actor.follow(0.0, 0.0, 1.0)
        actor.nod.phase = NodPhase.HOLDING
        actor.reset()
        assert (actor.x, actor.y, actor.aim_x, actor.aim_y) == anchor
        assert actor.nod.phase is NodPhase.IDLE

    def test_stream_origin_follows_lean(self, actor):
        idle = actor.stream_origin(Pose())
        leaning = actor.stream_origin(Pose(0.0, 2.0, 1.0, True))
        assert idle == (actor.x, actor.y - constants.ACTOR_STREAM_HEIGHT)
        assert leaning == (idle[0] + 2.0, idle[1] + 1.0)


class TestAim:

    def test_follow_eases_toward_target(self, actor):
        start = actor.aim_x
        actor.follow(start + 100.0, actor.aim_y, 1 / 60)
        moved = actor.aim_x - start
        assert 0.0 < moved < 100.0

    def test_follow_is_frame_rate_independent(self, rng):
        a, b = Actor(rng), Actor(rng)
        for _ in range(60):
            a.follow(10.0, 10.0, 1 / 60)
        for _ in range(30):
            b.follow(10.0, 10.0, 1 / 30)
        assert a.aim_x == pytest.approx(b.aim_x)
        assert a.aim_y == pytest.approx(b.aim_y)

    def test_zero_dt_does_not_move(self, actor):
        before = (actor.aim_x, actor.aim_y)
        actor.follow(0.0, 0.0, 0.0)
        assert (actor.aim_x, actor.aim_y) == before


class TestPose:

    def test_engaged_leans_without_nodding(self, actor):
        pose = actor.pose(1.0, True)
        assert pose == Pose(0.0, *constants.ACTOR_LEAN, True)

    def test_idle_schedules_first_nod(self, actor):
        pose = actor.pose(0.0, False)
        assert pose.head_bob == 0.0
        assert not pose.engaged
        assert actor.nod.phase is NodPhase.SCHEDULED
        low, high = constants.NOD_FIRST_DELAY_RANGE
        assert low <= actor.nod.next_at <= high

    def test_idle_nods_eventually_and_only_upward(self, actor):
        bobs = [actor.pose(t, False).head_bob for t in np.arange(0.0, 6.0, 0.01)]
        assert min(bobs) < 0.0
        assert max(bobs) <= 0.0
        assert min(bobs) >= -constants.NOD_AMPLITUDE_RANGE[1]

    def test_nod_ranges(self, actor):
        t = 0.0
        actor.pose(t, False)
        t = actor.nod.next_at
        actor.pose(t, False)
        nod = actor.nod
        assert nod.phase is NodPhase.RISING
        assert constants.NOD_RISE_RANGE[0] <= nod.rise <= constants.NOD_RISE_RANGE[1]
        assert constants.NOD_HOLD_RANGE[0] <= nod.hold <= constants.NOD_HOLD_RANGE[1]
        assert constants.NOD_FALL_RANGE[0] <= nod.fall <= constants.NOD_FALL_RANGE[1]
        assert constants.NOD_AMPLITUDE_RANGE[0] <= nod.amplitude <= constants.NOD_AMPLITUDE_RANGE[1]

    def test_next_nod_scheduled_after_this_one(self, actor):
        actor.pose(0.0, False)
        start = actor.nod.next_at
        actor.pose(start, False)
        end = start + actor.nod.duration
        actor.pose(end + 0.001, False)
        assert actor.nod.phase is NodPhase.SCHEDULED
        low, high = constants.NOD_GAP_RANGE
        assert end + low <= actor.nod.next_at <= end + high

    def test_engaging_cancels_and_defers_nod(self, actor):
        actor.pose(0.0, False)
        start = actor.nod.next_at
        actor.pose(start, False)
        assert actor.nod.active
        duration = actor.nod.duration

        actor.pose(start + 0.01, True)
        assert not actor.nod.active
        assert actor.nod.next_at >= start + 0.01 + constants.NOD_ENGAGED_DEFER
        # A brief engagement never brings the next nod forward.
        assert actor.nod.next_at >= start + duration + constants.NOD_GAP_RANGE[0]
        assert actor.pose(start + 0.3, False).head_bob == 0.0

    def test_next_nod_booked_when_nod_starts(self, actor):
        actor.pose(0.0, False)
        start = actor.nod.next_at
        actor.pose(start, False)
        low, high = constants.NOD_GAP_RANGE
        end = start + actor.nod.duration
        assert end + low <= actor.nod.next_at <= end + high


class TestNodSchedule:

    def test_phases_follow_elapsed_time(self):
        nod = NodSchedule(phase=NodPhase.RISING, rise=0.2, hold=0.5, fall=0.2, amplitude=1.0)
        assert nod.evaluate(0.0) == (NodPhase.RISING, 0.0)
        phase, level = nod.evaluate(0.1)
        assert phase is NodPhase.RISING
        assert level == pytest.approx(np.sin(np.pi / 4))
        assert nod.evaluate(0.3) == (NodPhase.HOLDING, 1.0)
        phase, level = nod.evaluate(0.8)
        assert phase is NodPhase.FALLING
        assert level == pytest.approx(np.cos(np.pi / 4))
        assert nod.evaluate(1.0) == (None, 0.0)

    def test_zero_length_phases_are_skipped(self):
        nod = NodSchedule(phase=NodPhase.RISING, rise=0.0, hold=0.5, fall=0.0, amplitude=1.0)
        assert nod.evaluate(0.0) == (NodPhase.HOLDING, 1.0)
        assert nod.evaluate(0.5) == (None, 0.0)

    def test_all_zero_nod_finishes_immediately(self):
        nod = NodSchedule(phase=NodPhase.RISING)
        assert nod.duration == 0.0
        assert nod.evaluate(0.0) == (None, 0.0)
