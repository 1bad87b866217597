"""The ring world: one ball, concentric rotating rings, and their bursts."""

import random

from internal.logging import get_logger
from simulation.entities import Ball, CollisionOutcome, Ring
from simulation.state import FrameSnapshot
from simulation.surface import require_surface


class World:
    """Owns the ball and every ring; advanced one tick at a time by the engine."""

    def __init__(self, config, surface, rng=None):
        self.config = config
        self.surface = require_surface(surface)
        self.rng = rng or random.Random(config.seed)
        self._log = get_logger("world")
        self.tick = 0
        self.generation = 0
        self.ball = None
        self.rings = []
        self.reset()

    @property
    def center(self):
        return self.surface.center

    def _build_rings(self):
        config = self.config
        colors = config.ring_colors
        return [Ring(index=i,
                     radius=config.ring_base_radius + i * config.ring_spacing,
                     color=colors[i % len(colors)],
                     gap_start=config.gap_start,
                     gap_size=config.gap_size,
                     rotation_speed=config.rotation_speed,
                     collision_margin=config.collision_margin)
                for i in range(config.ring_count)]

    def reset(self):
        """Fresh launch, all rings intact with zero rotation, no particles."""
        config = self.config
        center = self.center
        self.tick = 0
        self.generation += 1
        self.ball = Ball.launch(center.x, center.y, config.ball_radius, self.rng,
                                config.launch_speed_min, config.launch_speed_max)
        self.rings = self._build_rings()
        self._log.info("world reset", generation=self.generation, rings=len(self.rings),
                       vx=round(self.ball.vx, 3), vy=round(self.ball.vy, 3))

    def advance(self):
        """Advance one tick. Returns indices of rings shattered during this tick."""
        config = self.config
        center = self.center
        ball = self.ball

        for ring in self.rings:
            ring.advance()

        ball.integrate(config.gravity, center.y, config.gravity_above_factor, config.gravity_below_factor)

        # A bounce off one ring changes the velocity seen by the next ring's response
        destroyed = []
        for ring in sorted(self.rings, key=lambda r: r.radius):
            if ring.destroyed:
                continue
            outcome = ring.check_collision(ball.x, ball.y, ball.radius, center)
            if outcome is CollisionOutcome.PASS_THROUGH:
                ring.destroy(center, self.rng, config.particle_count,
                             config.particle_speed_min, config.particle_speed_max, config.particle_decay)
                destroyed.append(ring.index)
            elif outcome is CollisionOutcome.BOUNCE:
                nx, ny = ring.normal_at(ball.x, ball.y, center)
                ball.reflect(nx, ny, config.bounce_coefficient)

        ball.bounce_walls(self.surface.width, self.surface.height, config.wall_damping_x, config.wall_damping_y)
        ball.clamp_speed(config.max_component_speed)

        self.tick += 1
        for index in destroyed:
            self._log.info("ring shattered", ring=index, tick=self.tick, generation=self.generation)
        return destroyed

    @property
    def active_rings(self):
        return [ring for ring in self.rings if not ring.destroyed]

    def snapshot(self):
        return FrameSnapshot(self.tick, self.generation, self.surface.width, self.surface.height,
                             self.center, self.ball.to_state(), [ring.to_state() for ring in self.rings])
