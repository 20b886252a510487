#!/usr/bin/env python3
"""
Render sample maps from the full generation pipeline.

This runs:
1. Seed derivation from the game id
2. Terrain synthesis, building placement, smoothing
3. Connectivity repair and validation (with retries)

Usage:
    python generate_sample_maps.py [game_id] [player_count]

If no game id is provided, defaults to "demo-game"
"""

import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent))

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch

from py_gridmap.config.terrain_definitions import TERRAIN_DEFINITIONS
from py_gridmap.core.grid import Terrain
from py_gridmap.core.map_generator import generate_map


def render_map(game_id="demo-game", size=30, player_count=2):
    """Generate one map and save it as a PNG."""

    print(f"\nGenerating {size}x{size} map for '{game_id}' ({player_count} players)...")
    generated = generate_map(game_id, size, player_count)
    stats = generated.validation.stats

    print(f"  Seed: {generated.seed} (attempt seed {generated.attempt_seed}, "
          f"{generated.attempts} attempt(s))")
    print(f"  Settlements: {stats.settlements} | Strongholds: {stats.strongholds}")
    print(f"  Land: {stats.land_fraction*100:.1f}% | Water: {stats.water_fraction*100:.1f}%")
    for issue in generated.validation.issues:
        print(f"  ! {issue}")

    colors = [TERRAIN_DEFINITIONS[kind].color for kind in Terrain]
    cmap = ListedColormap(colors)

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.imshow(
        generated.grid.terrain,
        cmap=cmap,
        vmin=0,
        vmax=len(Terrain) - 1,
        interpolation="nearest",
    )

    # Remove axes for cleaner look
    ax.set_xticks([])
    ax.set_yticks([])

    title = f"{game_id} - {size}x{size} - {player_count} players\n"
    title += f"Land: {stats.land_fraction*100:.1f}% | Valid: {generated.validation.valid}"
    ax.set_title(title, fontsize=12, pad=12)

    legend = [
        Patch(facecolor=TERRAIN_DEFINITIONS[kind].color, label=TERRAIN_DEFINITIONS[kind].name)
        for kind in Terrain
    ]
    ax.legend(handles=legend, loc="upper left", bbox_to_anchor=(1.01, 1.0), fontsize=9)

    output_file = f"map_{game_id}_{size}.png"
    plt.savefig(output_file, dpi=150, bbox_inches="tight", pad_inches=0.1)
    print(f"  Saved to: {output_file}")

    plt.close(fig)
    return generated


def main():
    """Generate sample maps across the configured size range."""

    game_id = sys.argv[1] if len(sys.argv) > 1 else "demo-game"
    player_count = int(sys.argv[2]) if len(sys.argv) > 2 else 2

    print(f"Generating sample maps for game id: {game_id}")
    print("="*60)

    for size in (20, 30, 50, 100):
        render_map(game_id=game_id, size=size, player_count=player_count)

    print("\n" + "="*60)
    print("All maps generated")


if __name__ == "__main__":
    main()
