"""Offline matplotlib preview of the terrain, artifacts and one mission path."""

import sys
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation

from .catalog import ARTIFACTS, find_artifact
from .colorizer import hex_to_rgb
from .constants import MOON_RADIUS
from .elevation import ElevationField, build_catalog_field
from .scene import place_artifacts, terrain_mesh
from .trajectory import TrajectorySynthesizer, advance

# --- Preview Parameters ---
WIRE_WIDTH_SEGMENTS = 48
WIRE_HEIGHT_SEGMENTS = 24
ANIMATION_FRAMES = 240
ANIMATION_INTERVAL_MS = 30  # milliseconds per frame


def _style_axes(ax, limit: float) -> None:
    ax.set_facecolor('black')
    ax.set_xlim([-limit, limit])
    ax.set_ylim([-limit, limit])
    ax.set_zlim([-limit, limit])
    ax.set_xlabel("X", color='white', labelpad=10)
    ax.set_ylabel("Z", color='white', labelpad=10)
    ax.set_zlabel("Y (north)", color='white', labelpad=10)
    ax.tick_params(axis='x', colors='white')
    ax.tick_params(axis='y', colors='white')
    ax.tick_params(axis='z', colors='white')
    ax.xaxis.pane.fill = False
    ax.yaxis.pane.fill = False
    ax.zaxis.pane.fill = False
    ax.view_init(elev=20., azim=-30)


def _xyz(points):
    # Scene y is "up"; matplotlib's z axis is.
    arr = np.asarray(points, dtype=float).reshape(-1, 3)
    return arr[:, 0], arr[:, 2], arr[:, 1]


def render_preview(
    field: Optional[ElevationField],
    mission_name: Optional[str] = None,
    path: Optional[str] = None,
    synthesizer: Optional[TrajectorySynthesizer] = None,
):
    """Draw the wireframe terrain, markers and an optional trajectory.

    Returns (figure, axes, trajectory); trajectory is None without a mission.
    """
    fig = plt.figure(figsize=(10, 10))
    fig.patch.set_facecolor('black')
    ax = fig.add_subplot(111, projection='3d')

    mesh = terrain_mesh(field, WIRE_WIDTH_SEGMENTS, WIRE_HEIGHT_SEGMENTS)
    grid = mesh.vertices.reshape(WIRE_HEIGHT_SEGMENTS + 1, WIRE_WIDTH_SEGMENTS + 1, 3)
    ax.plot_wireframe(grid[:, :, 0], grid[:, :, 2], grid[:, :, 1], color='#00ff66', linewidth=0.3, alpha=0.4)

    markers = place_artifacts(ARTIFACTS, field)
    xs, ys, zs = _xyz([m.position for m in markers])
    ax.scatter(xs, ys, zs, c=[hex_to_rgb(m.color) for m in markers], s=8, depthshade=False)

    trajectory = None
    limit = MOON_RADIUS * 1.6
    if mission_name:
        artifact = find_artifact(mission_name)
        if artifact is None:
            raise ValueError(f"Unknown artifact: {mission_name}")
        synthesizer = synthesizer or TrajectorySynthesizer()
        trajectory = synthesizer.build(artifact, field)
        tx, ty, tz = _xyz(trajectory.points)
        ax.plot(tx, ty, tz, '-', color=hex_to_rgb(trajectory.color), linewidth=1.2, label=artifact.name)
        limit = max(limit, float(np.abs(np.asarray(trajectory.points)).max()) * 1.05)
        legend = ax.legend(facecolor='darkslategray', labelcolor='white', fontsize=8, loc='upper right')
        for text in legend.get_texts():
            text.set_color("white")

    _style_axes(ax, limit)

    if path:
        fig.savefig(path, dpi=120, facecolor=fig.get_facecolor())
    return fig, ax, trajectory


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    mission_name = argv[0] if argv else "Apollo 11 Eagle"

    field = build_catalog_field()
    synthesizer = TrajectorySynthesizer()
    fig, ax, _trajectory = render_preview(field, mission_name, synthesizer=synthesizer)

    artifact = find_artifact(mission_name)
    session = synthesizer.start_session(artifact, field)
    cursor_marker, = ax.plot([], [], [], 'o', color='white', markersize=5)
    frame_ms = 8000.0 / ANIMATION_FRAMES

    def update(frame):
        cursor = advance(session, frame_ms)
        if cursor is not None:
            x, y, z = _xyz([cursor.position])
            cursor_marker.set_data_3d(x, y, z)
        ax.set_title(f"{mission_name}\nProgress: {session.progress * 100:.0f}%", color='white', fontsize=10)
        return cursor_marker,

    ani = animation.FuncAnimation(
        fig=fig,
        func=update,
        frames=ANIMATION_FRAMES,
        interval=ANIMATION_INTERVAL_MS,
        blit=False,
        repeat=True,
    )

    try:
        plt.show()
    except Exception as e:
        print(f"Could not display plot: {e}")
        print("Ensure you have a graphical backend configured for matplotlib (e.g., TkAgg, Qt5Agg).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
