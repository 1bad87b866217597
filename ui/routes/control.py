"""Simulation control routes."""

import time

from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter(prefix="/api/v1/control", tags=["control"])

# These will be set by app.py
_engine = None
_bus = None


def init(engine, bus):
    """Initialize with engine and bus references."""
    global _engine, _bus
    _engine = engine
    _bus = bus


class ResizeRequest(BaseModel):
    width: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)
    device_pixel_ratio: float = Field(default=1.0, gt=0, allow_inf_nan=False)


@router.post("/pause")
async def pause():
    """Stop advancing the world; frames stop flowing."""
    await _engine.pause()
    await _bus.publish({"kind": "paused", "tick": _engine.tick, "timestamp": time.time()})
    return {"ok": True}


@router.post("/resume")
async def resume():
    await _engine.resume()
    await _bus.publish({"kind": "resumed", "tick": _engine.tick, "timestamp": time.time()})
    return {"ok": True}


@router.post("/reset")
async def reset():
    """Reset trigger: new launch, every ring intact, no particles."""
    await _engine.reset()
    await _bus.publish({"kind": "reset", "generation": _engine.world.generation, "timestamp": time.time()})
    return {"ok": True, "generation": _engine.world.generation}


@router.post("/resize")
async def resize(body: ResizeRequest):
    """Viewport changed; the scene recentres on the next frame."""
    changed = await _engine.resize(body.width, body.height, body.device_pixel_ratio)
    center = _engine.surface.center
    return {"ok": True, "changed": changed, "center": {"x": center.x, "y": center.y}}
