# looproute/services/segmenter.py

from typing import List, Sequence, TypeVar

from looproute.core.errors import EmptySegmentError

T = TypeVar("T")


class LoopSegmenter:
    """
    Splits a closed loop into chunks a routing provider accepts in one call.

    Consecutive chunks overlap by exactly one point: the last point of
    chunk k is the first point of chunk k+1. Every chunk has `max_points`
    points except possibly the last, which holds the remaining tail.
    """

    def __init__(self, max_points: int) -> None:
        if max_points < 2:
            raise ValueError(f"max_points must be >= 2, got {max_points}")
        self.max_points = max_points

    def segment(self, loop: Sequence[T]) -> List[List[T]]:
        return segment_loop(loop, self.max_points)


def segment_loop(loop: Sequence[T], max_points: int) -> List[List[T]]:
    if max_points < 2:
        raise ValueError(f"max_points must be >= 2, got {max_points}")
    if len(loop) < 2:
        raise EmptySegmentError(f"Cannot segment a loop of {len(loop)} point(s)")

    segments: List[List[T]] = []
    i = 0
    while True:
        if len(loop) - i <= max_points:
            segments.append(list(loop[i:]))
            break
        segments.append(list(loop[i:i + max_points]))
        # Next segment starts on the last point of this one
        i += max_points - 1

    return segments
