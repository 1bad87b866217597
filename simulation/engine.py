import asyncio

from communication.bus import EVENT_TOPIC, FRAME_TOPIC
from config import load_config
from internal.logging import get_logger
from simulation.surface import Surface, require_surface
from simulation.world import World
from utils.clock import FrameDeadline, format_timestamp


class EngineState:
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class SimulationEngine:
    """Drives the world at a fixed frame cadence and publishes every frame to the bus.

    There is no delta time: each frame advances the world by exactly one tick,
    so a slower frame rate means a slower game, not a coarser one.
    """

    def __init__(self, bus, config=None, surface=None, rng=None):
        self.bus = bus
        self.config = config or load_config().simulation
        self.surface = surface or Surface(self.config.surface_width, self.config.surface_height,
                                          self.config.device_pixel_ratio)
        self._lock = asyncio.Lock()
        self._log = get_logger("engine")
        self.world = World(self.config, self.surface, rng)
        self._state = EngineState.STOPPED
        self._task = None
        self._stop = asyncio.Event()
        self._deadline = None
        self._resized = False
        self.frames_published = 0

    @property
    def paused(self):
        return self._state == EngineState.PAUSED

    @property
    def state(self):
        return self._state

    @property
    def tick(self):
        return self.world.tick

    @property
    def frames_skipped(self):
        return self._deadline.skipped if self._deadline else 0

    async def reset(self):
        """Rebuild the world from scratch. Applied between frames."""
        async with self._lock:
            self.world.reset()

    async def resize(self, width, height, device_pixel_ratio=None):
        """Forward a resize notification to the surface. Ball and rings keep their state."""
        async with self._lock:
            return self.surface.resize(width, height, device_pixel_ratio)

    async def start(self):
        if self._task:
            return
        require_surface(self.surface)
        self._stop.clear()
        self._state = EngineState.RUNNING
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None
        self._state = EngineState.STOPPED
        await self.bus.publish({"kind": "engine_stopped", "tick": self.world.tick}, topic=EVENT_TOPIC)

    async def pause(self):
        async with self._lock:
            self._state = EngineState.PAUSED
            self._log.info("engine paused", tick=self.world.tick)

    async def resume(self):
        async with self._lock:
            self._state = EngineState.RUNNING
            self._log.info("engine resumed", tick=self.world.tick)

    async def get_snapshot(self):
        async with self._lock:
            return self.world.snapshot()

    def _on_resize(self, surface):
        self._resized = True

    async def _frame(self):
        async with self._lock:
            if self._state != EngineState.RUNNING:
                return
            destroyed = self.world.advance()
            snapshot = self.world.snapshot()

        await self.bus.publish(snapshot, topic=FRAME_TOPIC)
        self.frames_published += 1
        for index in destroyed:
            await self.bus.publish({"kind": "ring_destroyed", "ring": index, "tick": snapshot.tick,
                                    "generation": snapshot.generation, "timestamp": format_timestamp()},
                                   topic=EVENT_TOPIC)
        if self._resized:
            self._resized = False
            await self.bus.publish({"kind": "resized", "width": snapshot.width, "height": snapshot.height,
                                    "timestamp": format_timestamp()}, topic=EVENT_TOPIC)

    async def _loop(self):
        tick_interval = self.config.tick_interval
        self._deadline = FrameDeadline(tick_interval)
        remove_listener = self.surface.on_resize(self._on_resize)
        self._log.info("engine start", frame_rate=self.config.frame_rate, rings=len(self.world.rings))

        try:
            while not self._stop.is_set():
                wait_time = self._deadline.remaining()
                if wait_time > 0:
                    try:
                        await asyncio.wait_for(self._stop.wait(), timeout=wait_time)
                        break
                    except asyncio.TimeoutError:
                        pass
                self._deadline.advance()

                try:
                    await self._frame()
                except Exception as exc:
                    self._log.error("tick fail", error=exc, tick=self.world.tick)
        finally:
            remove_listener()
            self._log.info("engine stop", tick=self.world.tick, frames=self.frames_published,
                           skipped=self._deadline.skipped)
