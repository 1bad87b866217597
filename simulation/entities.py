import math
from enum import Enum

from simulation.geometry import (
    TAU, angle_in_interval, angle_of, clamp, distance, normalize_angle, reflect,
)
from simulation.state import BallState, ParticleState, RingState


class CollisionOutcome(Enum):
    NONE = "none"
    PASS_THROUGH = "pass_through"
    BOUNCE = "bounce"


class RingPhase(Enum):
    ACTIVE = "active"
    BURSTING = "bursting"
    SPENT = "spent"


class Ball:
    """The single moving body. Velocities are in units per tick."""

    def __init__(self, x, y, vx, vy, radius):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.radius = radius

    @classmethod
    def launch(cls, x, y, radius, rng, speed_min, speed_max):
        """Ball at (x, y) heading in a uniformly random direction."""
        angle = rng.random() * TAU
        speed = speed_min + rng.random() * (speed_max - speed_min)
        return cls(x, y, math.cos(angle) * speed, math.sin(angle) * speed, radius)

    def integrate(self, gravity, center_y, above_factor, below_factor):
        """Asymmetric gravity: stronger while above the center line, then move."""
        if self.y < center_y:
            self.vy += gravity * above_factor
        else:
            self.vy += gravity * below_factor
        self.x += self.vx
        self.y += self.vy

    def reflect(self, nx, ny, coefficient):
        self.vx, self.vy = reflect(self.vx, self.vy, nx, ny, coefficient)

    def bounce_walls(self, width, height, damping_x, damping_y):
        if self.x - self.radius < 0 or self.x + self.radius > width:
            self.vx *= -damping_x
        if self.y - self.radius < 0 or self.y + self.radius > height:
            self.vy *= -damping_y
            self.y = clamp(self.y, self.radius, height - self.radius)

    def clamp_speed(self, limit):
        """Per-axis clamp, not a norm clamp."""
        self.vx = clamp(self.vx, -limit, limit)
        self.vy = clamp(self.vy, -limit, limit)

    def to_state(self):
        return BallState(self.x, self.y, self.vx, self.vy, self.radius)


class Particle:
    """A fragment of a shattered ring. Alpha falls linearly with age."""

    __slots__ = ("x", "y", "vx", "vy", "decay", "age")

    def __init__(self, x, y, vx, vy, decay):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.decay = decay
        self.age = 0

    @property
    def alpha(self):
        return 1.0 - self.decay * self.age

    @property
    def alive(self):
        return self.alpha > 0

    def step(self):
        self.x += self.vx
        self.y += self.vy
        self.age += 1

    def to_state(self):
        return ParticleState(self.x, self.y, self.alpha)


class ParticleBurst:
    def __init__(self, particles=None):
        self.particles = particles or []

    @classmethod
    def spawn(cls, center, ring_radius, count, rng, speed_min=1.0, speed_max=3.0, decay=0.01):
        """Place count particles on the ring's circle, each flying outward along its own angle."""
        particles = []
        for _ in range(count):
            angle = rng.random() * TAU
            speed = speed_min + rng.random() * (speed_max - speed_min)
            cos_a, sin_a = math.cos(angle), math.sin(angle)
            particles.append(Particle(center.x + ring_radius * cos_a, center.y + ring_radius * sin_a,
                                      speed * cos_a, speed * sin_a, decay))
        return cls(particles)

    @property
    def exhausted(self):
        return not self.particles

    def advance(self):
        for particle in self.particles:
            particle.step()
        self.particles = [particle for particle in self.particles if particle.alive]

    def __len__(self):
        return len(self.particles)


class Ring:
    """Arc obstacle around the world center with a rotating gap."""

    def __init__(self, index, radius, color, gap_start, gap_size, rotation_speed, collision_margin=2):
        self.index = index
        self.radius = radius
        self.color = color
        self.gap_start = gap_start
        self.gap_size = gap_size
        self.rotation_speed = rotation_speed
        self.collision_margin = collision_margin
        self.rotation = 0.0
        self.destroyed = False
        self.burst = None

    @property
    def phase(self):
        if not self.destroyed:
            return RingPhase.ACTIVE
        return RingPhase.SPENT if self.burst.exhausted else RingPhase.BURSTING

    def advance(self):
        """Rotate the gap, or age the burst once shattered."""
        if self.destroyed:
            self.burst.advance()
            return
        self.rotation = normalize_angle(self.rotation + self.rotation_speed)

    def gap_interval(self):
        start = normalize_angle(self.gap_start + self.rotation)
        end = normalize_angle(start + self.gap_size)
        return start, end

    def check_collision(self, x, y, ball_radius, center):
        """Classify the ball against this ring for the current tick.

        Returns PASS_THROUGH when the ball overlaps the ring inside the gap,
        BOUNCE when it overlaps the solid arc, NONE otherwise. A ball sitting
        exactly on the center has no radial normal and is reported as NONE.
        """
        if self.destroyed:
            return CollisionOutcome.NONE
        dx = x - center.x
        dy = y - center.y
        dist = distance(dx, dy)
        if dist == 0:
            return CollisionOutcome.NONE
        touching = dist + ball_radius >= self.radius and dist - ball_radius <= self.radius + self.collision_margin
        if not touching:
            return CollisionOutcome.NONE
        start, end = self.gap_interval()
        if angle_in_interval(angle_of(dx, dy), start, end):
            return CollisionOutcome.PASS_THROUGH
        return CollisionOutcome.BOUNCE

    def normal_at(self, x, y, center):
        """Unit radial normal from the center toward (x, y)."""
        dx = x - center.x
        dy = y - center.y
        dist = distance(dx, dy)
        return dx / dist, dy / dist

    def destroy(self, center, rng, particle_count, speed_min=1.0, speed_max=3.0, decay=0.01):
        if self.destroyed:
            return False
        self.destroyed = True
        self.burst = ParticleBurst.spawn(center, self.radius, particle_count, rng, speed_min, speed_max, decay)
        return True

    def to_state(self):
        start, end = self.gap_interval()
        particles = [particle.to_state() for particle in self.burst.particles] if self.burst else []
        return RingState(self.index, self.radius, self.color, self.rotation, start, end,
                         self.destroyed, self.phase.value, particles)
