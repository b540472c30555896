from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from contextlib import asynccontextmanager, suppress
from dataclasses import asdict
from typing import Optional
import asyncio
import logging
import math
import time

from .catalog import ARTIFACTS, CRATERS, MARIA, RESOURCES, find_artifact
from .constants import CAMERA_HOME
from .elevation import ElevationField, build_catalog_field
from .scene import (
    artifact_count_text,
    artifact_info,
    camera_focus_path,
    elevation_km,
    filter_artifacts,
    place_artifacts,
    resource_ring,
    search_artifact,
    terrain_mesh,
)
from .trajectory import TrajectorySession, TrajectorySynthesizer, advance, classify_profile

logger = logging.getLogger(__name__)

FRAME_INTERVAL_S = 0.05  # 20 FPS


class ExplorerState:
    def __init__(self):
        self.field: Optional[ElevationField] = None
        self.session = TrajectorySession()
        self.selected: Optional[str] = None
        self.paused = False
        self.speed_scale = 1.0
        self.last_tick: Optional[float] = None

    def reset_session(self) -> None:
        self.session.clear()
        self.selected = None
        self.last_tick = None


state = ExplorerState()
synthesizer = TrajectorySynthesizer()

_terrain_cache: dict[tuple[int, int], dict] = {}

# Store active WebSocket connections
active_connections: list[WebSocket] = []


def _build_field() -> ElevationField:
    start = time.time()
    field = build_catalog_field()
    logger.info("[startup] Elevation field %dx%d ready in %.2fs", field.shape[0], field.shape[1], time.time() - start)
    return field


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    state.field = await asyncio.to_thread(_build_field)
    _terrain_cache.clear()

    animation_task = asyncio.create_task(animation_loop())
    try:
        yield
    finally:
        # Shutdown
        animation_task.cancel()
        with suppress(asyncio.CancelledError):
            await animation_task


app = FastAPI(title="Moon Explorer", lifespan=lifespan)


def _get_terrain_cached(width_segments: int, height_segments: int) -> dict:
    key = (int(width_segments), int(height_segments))
    cached = _terrain_cache.get(key)
    if cached is not None:
        return cached

    mesh = terrain_mesh(state.field, width_segments, height_segments)
    payload = {
        "width_segments": width_segments,
        "height_segments": height_segments,
        "vertices": mesh.vertices.round(4).tolist(),
        "colors": mesh.colors.round(4).tolist(),
        "faces": mesh.faces.tolist(),
    }

    # Only cache once real terrain exists and for the renderer's default size.
    if state.field is not None and key == (64, 32):
        _terrain_cache[key] = payload

    return payload


def _session_snapshot() -> dict:
    return {
        "selected": state.selected,
        "active": state.session.active,
        "progress": state.session.progress,
        "paused": state.paused,
        "speed_scale": state.speed_scale,
        "terrain_ready": state.field is not None,
    }


@app.get("/api/catalog")
async def get_catalog():
    """Static reference data"""
    return {
        "artifacts": [asdict(a) for a in ARTIFACTS],
        "craters": [asdict(c) for c in CRATERS],
        "maria": [asdict(m) for m in MARIA],
        "resources": [asdict(r) for r in RESOURCES],
    }


@app.get("/api/elevation")
async def get_elevation(lat: float, lon: float):
    # Out-of-range latitudes clamp to the poles inside sample().
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return {"error": "Invalid coordinates (expected finite lat/lon)"}

    elevation = 0.0 if state.field is None else state.field.sample(lat, lon)
    return {
        "lat": lat,
        "lon": lon,
        "elevation": elevation,
        "elevation_km": elevation_km(state.field, lat, lon),
    }


@app.get("/api/terrain")
async def get_terrain(width_segments: int = 64, height_segments: int = 32):
    if width_segments < 3 or width_segments > 512 or height_segments < 2 or height_segments > 256:
        return {"error": "Invalid segments (expected width 3..512, height 2..256)"}
    return _get_terrain_cached(width_segments, height_segments)


@app.get("/api/artifacts")
async def get_artifacts(soviet: bool = True, us: bool = True, other: bool = True, q: str = ""):
    """Visible artifact markers with their label placements"""
    visible = filter_artifacts(ARTIFACTS, soviet=soviet, us=us, other=other, query=q)
    markers = place_artifacts(visible, state.field)
    return {
        "count_text": artifact_count_text(len(visible), len(ARTIFACTS)),
        "markers": [
            {
                **artifact_info(m.artifact, state.field),
                "surface": m.surface,
                "position": m.position,
                "color": m.color,
                "label": m.label,
                "label_position": m.label_position,
            }
            for m in markers
        ],
    }


@app.get("/api/resources")
async def get_resources():
    rings = [resource_ring(r, state.field) for r in RESOURCES]
    return {
        "resources": [
            {
                "name": ring.resource.name,
                "type": ring.resource.type,
                "color": ring.color,
                "opacity": ring.opacity,
                "points": ring.points,
            }
            for ring in rings
        ]
    }


@app.get("/api/trajectory/{name}")
async def get_trajectory(name: str):
    artifact = find_artifact(name)
    if artifact is None:
        return {"error": f"Unknown artifact: {name}"}

    trajectory = synthesizer.build(artifact, state.field)
    return {
        "name": artifact.name,
        "profile": trajectory.profile.value,
        "color": trajectory.color,
        "segments": synthesizer.profile_segments(trajectory.profile),
        "points": trajectory.points,
    }


@app.get("/api/focus")
async def get_focus(
    q: str,
    steps: int = 60,
    x: float = CAMERA_HOME[0],
    y: float = CAMERA_HOME[1],
    z: float = CAMERA_HOME[2],
):
    """Camera path from (x, y, z) to the first artifact matching `q`"""
    if not q.strip():
        return {"error": "Empty search query"}
    if steps < 1 or steps > 600:
        return {"error": "Invalid steps (expected 1..600)"}
    if not all(math.isfinite(c) for c in (x, y, z)):
        return {"error": "Invalid camera position"}

    artifact = search_artifact(q)
    if artifact is None:
        return {"error": f"No artifact matches: {q}"}

    return {
        **artifact_info(artifact, state.field),
        "camera_path": camera_focus_path((x, y, z), artifact.lat, artifact.lon, steps=steps),
    }


@app.get("/api/state")
async def get_state():
    return _session_snapshot()


async def broadcast_to_clients(message: dict):
    """Send message to all connected clients"""

    async def _send_one(connection: WebSocket):
        try:
            await asyncio.wait_for(connection.send_json(message), timeout=0.5)
            return None
        except Exception:
            return connection

    connections = list(active_connections)
    if not connections:
        return

    results = await asyncio.gather(*(_send_one(connection) for connection in connections))
    for dead in results:
        if dead is None:
            continue
        try:
            active_connections.remove(dead)
        except ValueError:
            pass


def tick(now: float) -> Optional[dict]:
    """Advance the active session to `now` (seconds) and build a cursor message."""
    if state.last_tick is None:
        state.last_tick = now
    dt_ms = (now - state.last_tick) * 1000.0 * state.speed_scale
    state.last_tick = now

    if state.paused:
        return None

    cursor = advance(state.session, dt_ms)
    if cursor is None:
        return None

    return {
        "type": "cursor",
        "selected": state.selected,
        "progress": state.session.progress,
        "position": cursor.position,
        "tangent": cursor.tangent,
    }


async def animation_loop():
    """Advance the trajectory cursor once per frame"""
    try:
        while True:
            message = tick(time.monotonic())
            if message is not None:
                await broadcast_to_clients(message)

            await asyncio.sleep(FRAME_INTERVAL_S)
    except asyncio.CancelledError:
        return


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for cursor updates"""
    await websocket.accept()
    active_connections.append(websocket)

    try:
        initial_data = {
            "type": "init",
            "state": _session_snapshot(),
            "artifact_count": len(ARTIFACTS),
        }
        try:
            await websocket.send_json(initial_data)
        except Exception:
            return

        # Listen for client commands
        while True:
            try:
                data = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except Exception:
                await websocket.send_json({
                    "type": "error",
                    "command": None,
                    "message": "Invalid JSON message",
                })
                continue

            if not isinstance(data, dict):
                await websocket.send_json({
                    "type": "error",
                    "command": None,
                    "message": "Expected a JSON object",
                })
                continue

            command = data.get("command")

            handled = True
            ok = True

            if command == "select":
                name = str(data.get("name", ""))
                artifact = find_artifact(name) if name else None
                if artifact is None:
                    ok = False
                    await websocket.send_json({
                        "type": "error",
                        "command": command,
                        "message": f"Unknown artifact: {name!r}",
                    })
                else:
                    # Replacing the session drops the previous path.
                    state.session = synthesizer.start_session(artifact, state.field)
                    state.selected = artifact.name
                    state.last_tick = None
                    await broadcast_to_clients({
                        "type": "trajectory",
                        "name": artifact.name,
                        "color": state.session.color,
                        "segments": synthesizer.profile_segments(classify_profile(artifact.status, artifact.type)),
                        "points": state.session.points,
                    })

            elif command == "clear":
                state.reset_session()
                await broadcast_to_clients({"type": "cleared"})

            elif command == "pause":
                state.paused = not state.paused

            elif command == "set_speed":
                raw_speed = data.get("speed", 1.0)
                try:
                    speed = float(raw_speed)
                except (TypeError, ValueError):
                    ok = False
                    await websocket.send_json({
                        "type": "error",
                        "command": command,
                        "message": f"Invalid speed: {raw_speed!r}",
                    })
                else:
                    state.speed_scale = max(0.0, speed)

            elif command == "get_snapshot":
                await websocket.send_json({"type": "snapshot", "data": _session_snapshot()})

            else:
                handled = False
                ok = False
                await websocket.send_json({
                    "type": "error",
                    "command": command,
                    "message": "Unknown command",
                })

            if handled and ok:
                await websocket.send_json({"type": "ack", "command": command})

    except WebSocketDisconnect:
        pass
    finally:
        if websocket in active_connections:
            active_connections.remove(websocket)


def main(argv=None):
    import sys
    import uvicorn

    argv = sys.argv[1:] if argv is None else list(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(name)s | %(message)s")

    # Check for port argument
    port = 8712
    if argv and argv[0] == "--port":
        if len(argv) > 1:
            try:
                port = int(argv[1])
            except ValueError:
                logger.warning("Invalid port: %r; using default %d", argv[1], port)
        else:
            logger.warning("Missing port after --port; using default %d", port)

    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
