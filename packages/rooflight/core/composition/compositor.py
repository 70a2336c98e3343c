"""Compositor: merges per-priority groups into one canonical group list.

Groups are painted onto a full-length pixel buffer in ascending priority
(list order within a priority), so later writes win. The buffer is then
run-length encoded; pixels nobody wrote are gaps, not output.
"""

from __future__ import annotations

import logging

import numpy as np

from rooflight.core.design.models.pattern import LedColorGroup

logger = logging.getLogger(__name__)


class Compositor:
    """Priority-ordered pixel buffer compositor.

    Args:
        total_pixel_count: Strip length; writes beyond it are dropped.

    Example:
        >>> compositor = Compositor(40)
        >>> groups = compositor.composite({0: base_groups, 1: accent_groups})
    """

    def __init__(self, total_pixel_count: int) -> None:
        if total_pixel_count <= 0:
            raise ValueError(f"total_pixel_count must be positive, got {total_pixel_count}")
        self._total = total_pixel_count

    def composite(self, groups_by_priority: dict[int, list[LedColorGroup]]) -> list[LedColorGroup]:
        """Merge groups into a sorted, non-overlapping, maximal list.

        Args:
            groups_by_priority: Priority -> groups. Equal-priority layers are
                concatenated in layer order by the caller.

        Returns:
            Canonical LED color groups.
        """
        colors = np.zeros((self._total, 4), dtype=np.int16)
        written = np.zeros(self._total, dtype=bool)

        for priority in sorted(groups_by_priority):
            for group in groups_by_priority[priority]:
                if group.start_led >= self._total:
                    continue
                end = min(group.end_led, self._total - 1)
                colors[group.start_led : end + 1] = group.color
                written[group.start_led : end + 1] = True

        return self._run_length_encode(colors, written)

    def _run_length_encode(self, colors: np.ndarray, written: np.ndarray) -> list[LedColorGroup]:
        boundary = np.ones(self._total, dtype=bool)
        boundary[1:] = (written[1:] != written[:-1]) | np.any(colors[1:] != colors[:-1], axis=1)

        starts = np.flatnonzero(boundary)
        ends = np.append(starts[1:] - 1, self._total - 1)

        result = [
            LedColorGroup(
                start_led=int(start),
                end_led=int(end),
                color=tuple(int(c) for c in colors[start]),
            )
            for start, end in zip(starts, ends)
            if written[start]
        ]
        logger.debug(
            f"Composited {int(written.sum())}/{self._total} lit pixels into {len(result)} group(s)"
        )
        return result


__all__ = ["Compositor"]
