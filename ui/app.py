"""FastAPI application factory."""

import asyncio
import json
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles

from communication.bus import EventBus
from config import load_config
from internal.errors import SurfaceUnavailableError
from internal.health import (
    HealthChecker,
    check_event_loop,
    create_bus_check,
    create_engine_check,
    create_surface_check,
)
from internal.logging import StructuredLogger, get_logger, parse_level
from simulation.engine import SimulationEngine
from simulation.state import FrameSnapshot
from ui.routes import api, control, health
from utils.crash import create_async_handler

STATIC_DIR = Path(__file__).parent / "static"


def create_app(config=None, rng=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    StructuredLogger.configure(min_level=parse_level(config.logging.level))
    logger_instance = get_logger("app")

    bus = EventBus(queue_size=100)
    # Raises SurfaceUnavailableError before anything is served
    engine = SimulationEngine(bus=bus, config=config.simulation, rng=rng)
    health_checker = HealthChecker()
    health_checker.register("event_loop", check_event_loop, critical=True)
    health_checker.register("event_bus", create_bus_check(bus), critical=False)
    health_checker.register("simulation_engine", create_engine_check(engine), critical=True)
    health_checker.register("surface", create_surface_check(engine.surface), critical=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger_instance.info("application starting", version="1.0.0")
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger_instance))

        await engine.start()
        logger_instance.info("application started")
        try:
            yield
        finally:
            logger_instance.info("application shutting down")
            await engine.stop()
            logger_instance.info("application shutdown complete")

    app = FastAPI(
        title="Ring Breaker",
        version="1.0.0",
        description="ball-in-rotating-rings physics toy",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.bus = bus

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.exception_handler(SurfaceUnavailableError)
    async def surface_unavailable(request: Request, exc: SurfaceUnavailableError):
        logger_instance.warn("surface rejected", error=exc, path=request.url.path)
        return JSONResponse(status_code=409, content=exc.to_dict())

    control.init(engine, bus)
    api.init(engine, bus)
    health.init(engine, health_checker)

    app.include_router(control.router)
    app.include_router(api.router)
    app.include_router(health.router)

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """Serve the canvas page."""
        return (STATIC_DIR / "index.html").read_text(encoding="utf-8")

    @app.get("/events")
    async def events(request: Request):
        """SSE endpoint - streams frames and lifecycle events to renderers."""
        subscriber_name = f"ui-{uuid.uuid4().hex[:8]}"
        return StreamingResponse(frame_stream(request, bus, engine, subscriber_name),
                                 media_type="text/event-stream")

    return app


async def frame_stream(request, bus, engine, subscriber_name):
    """Current frame first, then everything the engine publishes until the client leaves."""
    async with bus.subscription(subscriber_name, max_queue_size=10) as sub:
        snapshot = await engine.get_snapshot()
        yield format_sse("state", snapshot.to_dict())

        while True:
            if await request.is_disconnected():
                break

            try:
                item = await asyncio.wait_for(sub.queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue

            if isinstance(item, FrameSnapshot):
                yield format_sse("state", item.to_dict())
            else:
                yield format_sse("event", item)


def format_sse(event, data):
    """Format data as Server-Sent Event."""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"
