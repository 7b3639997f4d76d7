"""
Example: Plane Wave from a Linear Array
=======================================
A plane wave travelling at 30 degrees off the array normal, synthesized by a
3 m linear loudspeaker array with 0.15 m spacing. This demonstrates the WFS
workflow: array creation, loudspeaker selection, tapering, driving signals
and the resulting sound field.

Output: plane_wave.png (sound field snapshot)

Array: 21 loudspeakers on the x axis, facing -y
Source: plane wave, direction (sin 30°, -cos 30°, 0)
Time: 300 samples @ 44.1 kHz
"""

import numpy as np

from wfs_toolbox import WFSConfig, plot_wavefield, wave_field_imp_wfs_25d

# Configuration
# - 44.1 kHz, c = 343 m/s
# - Amplitude correct on the line y = -2 m
conf = WFSConfig(fs=44100, c=343.0, xref=(0.0, -2.0, 0.0), resolution=300)

angle = np.radians(30)
direction = (np.sin(angle), -np.cos(angle), 0.0)

field = wave_field_imp_wfs_25d(
    X=[-2.0, 2.0],
    Y=[-3.0, 0.15],
    xs=direction,
    src="pw",
    t=300,
    L=3.0,
    conf=conf,
)

print("=" * 60)
print("WFS Simulation: Plane Wave")
print("=" * 60)
print(f"Active loudspeakers: {len(field.x0)}")
print(f"Tapering window: {np.round(field.win, 2)}")
print(f"Grid: {len(field.x)} × {len(field.y)} points")
print("=" * 60)

fig, ax = plot_wavefield(field.x, field.y, field.p, field.x0, field.win)
ax.set_title("Plane wave, 30°")
fig.savefig("plane_wave.png", dpi=150, bbox_inches="tight")
print("✓ Saved: plane_wave.png")
