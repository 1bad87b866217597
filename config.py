import json
import math
from pathlib import Path

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"

DEFAULT_RING_COLORS = ("#dfb220", "#ea2636", "#6dc993", "#fc2936", "#eeb421", "#6dc993")


class SimulationConfig:
    """Tunables for the ring world. Speeds and accelerations are per tick, not per second."""

    __slots__ = (
        "frame_rate", "surface_width", "surface_height", "device_pixel_ratio", "seed",
        "ring_count", "ring_base_radius", "ring_spacing", "ring_colors",
        "gap_start", "gap_size", "rotation_speed",
        "gravity", "gravity_above_factor", "gravity_below_factor",
        "ball_radius", "launch_speed_min", "launch_speed_max",
        "bounce_coefficient", "collision_margin",
        "wall_damping_x", "wall_damping_y", "max_component_speed",
        "particle_count", "particle_speed_min", "particle_speed_max", "particle_decay",
    )

    def __init__(self, frame_rate=60, surface_width=800, surface_height=600, device_pixel_ratio=1.0,
                 seed=None, ring_count=6, ring_base_radius=80, ring_spacing=35, ring_colors=DEFAULT_RING_COLORS,
                 gap_start=-math.pi / 2, gap_size=math.pi / 4, rotation_speed=0.02,
                 gravity=0.15, gravity_above_factor=1.2, gravity_below_factor=0.8,
                 ball_radius=16, launch_speed_min=1.5, launch_speed_max=3.0,
                 bounce_coefficient=2.5, collision_margin=2,
                 wall_damping_x=0.9, wall_damping_y=0.8, max_component_speed=6,
                 particle_count=100, particle_speed_min=1.0, particle_speed_max=3.0, particle_decay=0.01):
        self.frame_rate = frame_rate
        self.surface_width = surface_width
        self.surface_height = surface_height
        self.device_pixel_ratio = device_pixel_ratio
        self.seed = seed
        self.ring_count = ring_count
        self.ring_base_radius = ring_base_radius
        self.ring_spacing = ring_spacing
        self.ring_colors = tuple(ring_colors)
        self.gap_start = gap_start
        self.gap_size = gap_size
        self.rotation_speed = rotation_speed
        self.gravity = gravity
        self.gravity_above_factor = gravity_above_factor
        self.gravity_below_factor = gravity_below_factor
        self.ball_radius = ball_radius
        self.launch_speed_min = launch_speed_min
        self.launch_speed_max = launch_speed_max
        self.bounce_coefficient = bounce_coefficient
        self.collision_margin = collision_margin
        self.wall_damping_x = wall_damping_x
        self.wall_damping_y = wall_damping_y
        self.max_component_speed = max_component_speed
        self.particle_count = particle_count
        self.particle_speed_min = particle_speed_min
        self.particle_speed_max = particle_speed_max
        self.particle_decay = particle_decay

    @property
    def tick_interval(self):
        return 1.0 / self.frame_rate


class ServerConfig:
    __slots__ = ("host", "port")

    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level", "crash_file")

    def __init__(self, level="INFO", crash_file="logs/crash.log"):
        self.level = level
        self.crash_file = crash_file


class Config:
    __slots__ = ("simulation", "server", "logging")

    def __init__(self, simulation=None, server=None, logging=None):
        self.simulation = simulation or SimulationConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        return cls(
            SimulationConfig(**d.get("simulation", {})),
            ServerConfig(**d.get("server", {})),
            LoggingConfig(**d.get("logging", {})),
        )


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    with open(config_path) as file:
        return Config.from_dict(json.load(file))
