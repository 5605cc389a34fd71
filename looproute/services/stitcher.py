# looproute/services/stitcher.py

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def stitch(polylines: Sequence[Sequence[T]]) -> List[T]:
    """
    Concatenate per-segment polylines into one continuous path.

    Each polyline after the first starts on the point the previous one
    ended on (segments overlap by one point), so that first point is
    dropped. Empty polylines are skipped. Returns [] if every input is
    empty; callers treat that as "no route".
    """
    route: List[T] = []

    for line in polylines:
        if not line:
            continue
        if not route:
            route.extend(line)
        else:
            route.extend(line[1:])

    return route
