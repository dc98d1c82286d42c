"""
Visualization Tools for Turing Machine Runs

Provides tools for visualizing:
- Tape evolution over time (space-time diagram)
- How often each state was executed
"""

from typing import Dict, List, Optional, Tuple
import numpy as np

import matplotlib.pyplot as plt

from turing.machine import Snapshot


def history_to_array(
    history: List[Snapshot],
    lo: Optional[int] = None,
    hi: Optional[int] = None,
) -> Tuple[np.ndarray, int]:
    """
    Convert a run history to a 2D bit array.

    Args:
        history: Snapshots recorded by a TuringMachine
        lo: Leftmost tape position to include (default: leftmost seen)
        hi: Rightmost tape position to include (default: rightmost seen)

    Returns:
        Tuple of (array of shape (len(history), hi - lo + 1), lo)
    """
    if not history:
        return np.zeros((0, 0), dtype=np.uint8), 0

    positions = [snap.cursor for snap in history]
    positions.extend(snap.written[0] for snap in history if snap.written is not None)

    lo = min(positions) if lo is None else lo
    hi = max(positions) if hi is None else hi

    grid = np.zeros((len(history), hi - lo + 1), dtype=np.uint8)
    for row, snap in enumerate(history):
        if row:
            grid[row] = grid[row - 1]
        if snap.written is not None:
            pos, bit = snap.written
            if lo <= pos <= hi:
                grid[row, pos - lo] = bit

    return grid, lo


def plot_spacetime(
    history: List[Snapshot],
    title: str = "Tape Evolution",
    save_path: Optional[str] = None,
):
    """
    Plot the tape after every step, one row per step, with the cursor path.

    Args:
        history: Snapshots recorded by a TuringMachine
        title: Plot title
        save_path: Optional path to save the figure
    """
    grid, lo = history_to_array(history)
    if grid.size == 0:
        print("Nothing to plot: empty history")
        return

    fig, ax = plt.subplots(figsize=(10, 8))

    ax.imshow(
        grid,
        origin="upper",
        aspect="auto",
        cmap="Greys",
        vmin=0,
        vmax=1,
        interpolation="nearest",
        extent=(lo - 0.5, lo + grid.shape[1] - 0.5, len(history) - 0.5, -0.5),
    )

    steps = [snap.step for snap in history]
    cursors = [snap.cursor for snap in history]
    ax.plot(cursors, steps, color="#00cc6a", linewidth=1.5, label="Cursor")

    ax.set_xlabel("Tape position", fontsize=12)
    ax.set_ylabel("Step", fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.legend(loc="lower right")

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150)
        print(f"Saved to {save_path}")
    else:
        plt.show()

    plt.close(fig)


def plot_state_visits(
    metrics: Dict[str, object],
    title: str = "Steps per State",
    save_path: Optional[str] = None,
):
    """
    Bar chart of how many steps were executed in each state.

    Args:
        metrics: Output of TuringMachine.get_metrics()
        title: Plot title
        save_path: Optional path to save the figure
    """
    visits = metrics.get("state_visits") or {}
    if not visits:
        print("Nothing to plot: no steps executed")
        return

    names = sorted(visits)
    counts = np.array([visits[name] for name in names])

    fig, ax = plt.subplots(figsize=(10, 6))

    colors = plt.cm.viridis(np.linspace(0, 1, len(names)))
    ax.bar(names, counts, color=colors)

    ax.set_xlabel("State", fontsize=12)
    ax.set_ylabel("Steps", fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.grid(True, axis="y", alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150)
        print(f"Saved to {save_path}")
    else:
        plt.show()

    plt.close(fig)
