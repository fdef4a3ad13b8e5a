"""Nearest-neighbor visit ordering with fixed endpoints.

The first and last stops of a day are pinned (for example hotel in the
morning, dinner reservation at night); only the stops in between are
reordered. This is a greedy, single-pass heuristic rather than a full TSP
solve: each step jumps to the closest unvisited stop and never revisits an
earlier choice.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .models import RouteSummary, TravelMatrix

Matrix = Sequence[Sequence[Optional[float]]]


def solve_sequence(time_matrix: Matrix) -> list[int]:
    """Return a visiting order over the indices of ``time_matrix``.

    Args:
        time_matrix: Square matrix of travel times in seconds. ``None`` cells
            mark pairs without a known time.

    Returns:
        A permutation of ``range(N)`` starting at 0 and ending at N-1 (N >= 2).
    """
    size = len(time_matrix)
    if size == 0:
        return []
    if size == 1:
        return [0]
    if size == 2:
        return [0, 1]

    last = size - 1
    order = [0]
    # Insertion-ordered pool; ties and all-unknown rows resolve to the earliest candidate.
    remaining = list(range(1, last))

    while remaining:
        current = order[-1]
        row = time_matrix[current]
        best: Optional[int] = None
        best_time: Optional[float] = None
        for candidate in remaining:
            travel_time = row[candidate]
            if travel_time is None:
                continue
            if best_time is None or travel_time < best_time:
                best = candidate
                best_time = travel_time
        if best is None:
            best = remaining[0]
        order.append(best)
        remaining.remove(best)

    order.append(last)
    return order


def summarize_path(matrix: TravelMatrix, order: Sequence[int]) -> RouteSummary:
    """Sum distance/time over consecutive stops of ``order``; unknown cells count as zero."""
    total_distance = 0.0
    total_time = 0.0
    for from_idx, to_idx in zip(order, order[1:]):
        distance = matrix.distances[from_idx][to_idx]
        travel_time = matrix.times[from_idx][to_idx]
        total_distance += distance if distance is not None else 0.0
        total_time += travel_time if travel_time is not None else 0.0
    return RouteSummary(total_distance=total_distance, total_time=total_time)
