from utils.clock import format_timestamp


class BallState:
    __slots__ = ("x", "y", "vx", "vy", "radius")

    def __init__(self, x, y, vx, vy, radius):
        self.x, self.y, self.vx, self.vy, self.radius = x, y, vx, vy, radius

    def to_dict(self):
        return {"x": self.x, "y": self.y, "vx": self.vx, "vy": self.vy, "radius": self.radius}


class ParticleState:
    __slots__ = ("x", "y", "alpha")

    def __init__(self, x, y, alpha):
        self.x, self.y, self.alpha = x, y, alpha


class RingState:
    __slots__ = ("index", "radius", "color", "rotation", "gap_start", "gap_end", "destroyed", "phase", "particles")

    def __init__(self, index, radius, color, rotation, gap_start, gap_end, destroyed, phase, particles):
        self.index = index
        self.radius = radius
        self.color = color
        self.rotation = rotation
        self.gap_start = gap_start
        self.gap_end = gap_end
        self.destroyed = destroyed
        self.phase = phase
        self.particles = tuple(particles)

    def to_dict(self):
        return {
            "index": self.index,
            "radius": self.radius,
            "color": self.color,
            "rotation": self.rotation,
            "gap": [self.gap_start, self.gap_end],
            "destroyed": self.destroyed,
            "phase": self.phase,
            "particles": [[p.x, p.y, p.alpha] for p in self.particles],
        }


class FrameSnapshot:
    """Everything a renderer needs to draw one frame. Never mutated after creation."""

    __slots__ = ("timestamp", "tick", "generation", "width", "height", "center", "ball", "rings")

    def __init__(self, tick, generation, width, height, center, ball, rings, timestamp=None):
        self.timestamp = timestamp or format_timestamp()
        self.tick = tick
        self.generation = generation
        self.width = width
        self.height = height
        self.center = center
        self.ball = ball
        self.rings = tuple(rings)

    @property
    def destroyed_count(self):
        return sum(1 for ring in self.rings if ring.destroyed)

    @property
    def particle_count(self):
        return sum(len(ring.particles) for ring in self.rings)

    def to_dict(self):
        return {
            "timestamp": self.timestamp,
            "tick": self.tick,
            "generation": self.generation,
            "surface": {"width": self.width, "height": self.height},
            "center": {"x": self.center.x, "y": self.center.y},
            "ball": self.ball.to_dict(),
            "rings": [ring.to_dict() for ring in self.rings],
        }
