"""Unit tests for the ball, rings and particle bursts."""

import math
import random

import pytest

from simulation.entities import (
    Ball, CollisionOutcome, Particle, ParticleBurst, Ring, RingPhase,
)
from simulation.geometry import TAU, Point2, distance
from simulation.state import BallState, RingState


def make_ring(radius=100, gap_start=-math.pi / 2, gap_size=math.pi / 4, rotation_speed=0.02):
    return Ring(index=0, radius=radius, color="#dfb220", gap_start=gap_start, gap_size=gap_size,
                rotation_speed=rotation_speed, collision_margin=2)


def at_angle(center, radius, angle):
    return center.x + radius * math.cos(angle), center.y + radius * math.sin(angle)


class TestBall:
    """Tests for Ball."""

    def test_gravity_stronger_above_center(self):
        """Above the center line the ball gets the larger pull."""
        ball = Ball(400, 200, 0, 0, 16)
        ball.integrate(0.15, 300, 1.2, 0.8)
        assert ball.vy == pytest.approx(0.18)
        assert ball.y == pytest.approx(200.18)

    def test_gravity_weaker_below_center(self):
        ball = Ball(400, 400, 0, 0, 16)
        ball.integrate(0.15, 300, 1.2, 0.8)
        assert ball.vy == pytest.approx(0.12)

    def test_gravity_at_center_uses_lower_factor(self):
        """Exactly on the center line counts as below."""
        ball = Ball(400, 300, 0, 0, 16)
        ball.integrate(0.15, 300, 1.2, 0.8)
        assert ball.vy == pytest.approx(0.12)

    def test_integrate_moves_by_velocity(self):
        ball = Ball(10, 10, 2, -1, 16)
        ball.integrate(0, 300, 1.2, 0.8)
        assert (ball.x, ball.y) == (12, 9)

    def test_right_wall_damps_and_flips_vx(self):
        ball = Ball(795, 300, 5, 0, 16)
        ball.bounce_walls(800, 600, 0.9, 0.8)
        assert ball.vx == pytest.approx(-4.5)
        assert ball.x == 795

    def test_bottom_wall_damps_flips_and_clamps(self):
        ball = Ball(400, 590, 0, 5, 16)
        ball.bounce_walls(800, 600, 0.9, 0.8)
        assert ball.vy == pytest.approx(-4.0)
        assert ball.y == 584

    def test_top_wall_clamps_inside(self):
        ball = Ball(400, 3, 0, -5, 16)
        ball.bounce_walls(800, 600, 0.9, 0.8)
        assert ball.vy == pytest.approx(4.0)
        assert ball.y == 16

    def test_clamp_speed_per_axis(self):
        """Each component is clamped on its own, not the vector norm."""
        ball = Ball(0, 0, 10, -5.5, 16)
        ball.clamp_speed(6)
        assert (ball.vx, ball.vy) == (6, -5.5)

    def test_launch_speed_in_range(self):
        rng = random.Random(42)
        for _ in range(50):
            ball = Ball.launch(400, 300, 16, rng, 1.5, 3.0)
            assert (ball.x, ball.y) == (400, 300)
            assert 1.5 - 1e-9 <= distance(ball.vx, ball.vy) < 3.0 + 1e-9

    def test_launch_is_reproducible_with_seed(self):
        first = Ball.launch(0, 0, 16, random.Random(9), 1.5, 3.0)
        second = Ball.launch(0, 0, 16, random.Random(9), 1.5, 3.0)
        assert (first.vx, first.vy) == (second.vx, second.vy)

    def test_to_state(self):
        state = Ball(1, 2, 3, 4, 16).to_state()
        assert isinstance(state, BallState)
        assert state.to_dict() == {"x": 1, "y": 2, "vx": 3, "vy": 4, "radius": 16}


class TestRingGap:
    """Tests for ring rotation and the rotated gap interval."""

    def test_initial_gap_interval(self):
        ring = make_ring()
        start, end = ring.gap_interval()
        assert start == pytest.approx(3 * math.pi / 2)
        assert end == pytest.approx(7 * math.pi / 4)

    def test_advance_rotates(self):
        ring = make_ring()
        ring.advance()
        assert ring.rotation == pytest.approx(0.02)
        assert ring.gap_interval()[0] == pytest.approx(3 * math.pi / 2 + 0.02)

    def test_rotation_wraps(self):
        ring = make_ring(rotation_speed=4)
        ring.advance()
        ring.advance()
        assert 0 <= ring.rotation < TAU
        assert ring.rotation == pytest.approx(8 - TAU)

    def test_gap_wraps_across_seam(self):
        """A gap straddling angle 0 reports end < start."""
        ring = make_ring(gap_start=-math.pi / 8)
        start, end = ring.gap_interval()
        assert end < start
        assert end == pytest.approx(math.pi / 8)

    def test_destroyed_ring_stops_rotating(self, center):
        ring = make_ring()
        ring.destroy(center, random.Random(1), 10)
        ring.advance()
        assert ring.rotation == 0.0


class TestRingCollision:
    """Tests for Ring.check_collision."""

    def test_ball_straight_up_is_in_gap(self, center):
        """Gap at -pi/2 with no rotation: straight up passes through."""
        ring = make_ring()
        x, y = center.x, center.y - 100
        assert ring.check_collision(x, y, 16, center) is CollisionOutcome.PASS_THROUGH

    def test_ball_to_the_right_bounces(self, center):
        ring = make_ring()
        assert ring.check_collision(center.x + 100, center.y, 16, center) is CollisionOutcome.BOUNCE

    def test_ball_inside_not_touching(self, center):
        ring = make_ring()
        assert ring.check_collision(center.x + 50, center.y, 16, center) is CollisionOutcome.NONE

    def test_collision_margin_outside_ring(self, center):
        """The outer edge reaches radius + margin."""
        ring = make_ring()
        assert ring.check_collision(center.x + 117, center.y, 16, center) is CollisionOutcome.BOUNCE
        assert ring.check_collision(center.x + 119, center.y, 16, center) is CollisionOutcome.NONE

    def test_gap_across_seam(self, center):
        ring = make_ring(gap_start=-math.pi / 8)
        assert ring.check_collision(center.x + 100, center.y, 16, center) is CollisionOutcome.PASS_THROUGH
        x, y = at_angle(center, 100, math.pi / 2)
        assert ring.check_collision(x, y, 16, center) is CollisionOutcome.BOUNCE

    def test_gap_follows_rotation(self, center):
        """After rotating a quarter turn the gap faces right."""
        ring = make_ring(rotation_speed=math.pi / 2)
        ring.advance()
        assert ring.check_collision(center.x + 100, center.y, 16, center) is CollisionOutcome.PASS_THROUGH
        assert ring.check_collision(center.x, center.y - 100, 16, center) is CollisionOutcome.BOUNCE

    def test_ball_exactly_at_center_is_ignored(self, center):
        """No radial normal at the center, so no response."""
        ring = make_ring(radius=10)
        assert ring.check_collision(center.x, center.y, 16, center) is CollisionOutcome.NONE

    def test_destroyed_ring_never_collides(self, center):
        ring = make_ring()
        ring.destroy(center, random.Random(1), 10)
        assert ring.check_collision(center.x + 100, center.y, 16, center) is CollisionOutcome.NONE

    def test_normal_points_outward(self, center):
        ring = make_ring()
        assert ring.normal_at(center.x, center.y + 50, center) == pytest.approx((0, 1))


class TestRingDestroy:
    """Tests for ring destruction and phases."""

    def test_destroy_spawns_full_burst(self, center):
        ring = make_ring()
        assert ring.destroy(center, random.Random(1), 100) is True
        assert ring.destroyed is True
        assert len(ring.burst) == 100
        assert ring.phase is RingPhase.BURSTING

    def test_destroy_twice_is_noop(self, center):
        ring = make_ring()
        ring.destroy(center, random.Random(1), 100)
        burst = ring.burst
        assert ring.destroy(center, random.Random(2), 5) is False
        assert ring.burst is burst
        assert ring.destroyed is True

    def test_phases(self, center):
        ring = make_ring()
        assert ring.phase is RingPhase.ACTIVE
        ring.destroy(center, random.Random(1), 3, decay=0.5)
        assert ring.phase is RingPhase.BURSTING
        ring.advance()
        ring.advance()
        assert ring.phase is RingPhase.SPENT
        assert ring.destroyed is True

    def test_to_state(self, center):
        ring = make_ring()
        state = ring.to_state()
        assert isinstance(state, RingState)
        assert state.phase == "active"
        assert state.particles == ()
        ring.destroy(center, random.Random(1), 4)
        data = ring.to_state().to_dict()
        assert data["destroyed"] is True
        assert len(data["particles"]) == 4


class TestParticleBurst:
    """Tests for ParticleBurst and Particle."""

    def test_particles_start_on_ring_circle(self, center):
        burst = ParticleBurst.spawn(center, 115, 50, random.Random(3))
        for particle in burst.particles:
            assert distance(particle.x - center.x, particle.y - center.y) == pytest.approx(115)
            assert particle.alpha == 1.0

    def test_particles_fly_outward(self, center):
        burst = ParticleBurst.spawn(center, 115, 50, random.Random(3), speed_min=1, speed_max=3)
        for particle in burst.particles:
            radial = (particle.x - center.x) * particle.vx + (particle.y - center.y) * particle.vy
            assert radial > 0
            assert 1 - 1e-9 <= distance(particle.vx, particle.vy) < 3 + 1e-9

    def test_alpha_strictly_decreasing(self, center):
        burst = ParticleBurst.spawn(center, 80, 10, random.Random(3), decay=0.01)
        previous = [p.alpha for p in burst.particles]
        for _ in range(20):
            burst.advance()
            current = [p.alpha for p in burst.particles]
            assert all(now < before for now, before in zip(current, previous))
            previous = current

    def test_empty_after_full_decay(self, center):
        """100 particles at decay 0.01 last exactly 100 ticks."""
        burst = ParticleBurst.spawn(center, 80, 100, random.Random(3), decay=0.01)
        assert len(burst) == 100
        for _ in range(99):
            burst.advance()
        assert len(burst) == 100
        burst.advance()
        assert burst.exhausted

    def test_no_faded_particle_survives_advance(self, center):
        burst = ParticleBurst.spawn(center, 80, 20, random.Random(3), decay=0.25)
        for _ in range(4):
            burst.advance()
            assert all(p.alpha > 0 for p in burst.particles)
        assert burst.exhausted

    def test_particle_step(self):
        particle = Particle(0, 0, 1, 2, 0.1)
        particle.step()
        assert (particle.x, particle.y) == (1, 2)
        assert particle.alpha == pytest.approx(0.9)

    def test_particle_uses_slots(self):
        assert hasattr(Particle, "__slots__")

    def test_spawn_uses_point(self):
        burst = ParticleBurst.spawn(Point2(0, 0), 10, 1, random.Random(0))
        assert len(burst) == 1
