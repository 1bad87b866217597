"""Read-only API routes: current frame, stats, subscribers."""

from fastapi import APIRouter

from utils.clock import format_timestamp

router = APIRouter(prefix="/api/v1", tags=["api"])

# These will be set by app.py
_engine = None
_bus = None


def init(engine, bus):
    """Initialize with engine and bus references."""
    global _engine, _bus
    _engine = engine
    _bus = bus


@router.get("/snapshot")
async def snapshot():
    """The frame a renderer would draw right now."""
    frame = await _engine.get_snapshot()
    return frame.to_dict()


@router.get("/stats")
async def stats():
    frame = await _engine.get_snapshot()
    return {
        "timestamp": format_timestamp(),
        "simulation": {
            "tick": frame.tick,
            "generation": frame.generation,
            "rings_total": len(frame.rings),
            "rings_destroyed": frame.destroyed_count,
            "particles": frame.particle_count,
            "state": _engine.state,
            "frames_published": _engine.frames_published,
            "frames_skipped": _engine.frames_skipped,
        },
        "surface": {"width": frame.width, "height": frame.height,
                    "device_pixel_ratio": _engine.surface.device_pixel_ratio},
        "bus": _bus.get_stats(),
    }


@router.get("/subscribers")
async def subscribers():
    return await _bus.get_subscriber_info()
