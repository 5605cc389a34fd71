# looproute/services/tour_applier.py

from typing import List, Sequence, TypeVar

from looproute.core.errors import InvalidTourError

T = TypeVar("T")


def validate_tour(tour: Sequence[int], n: int) -> None:
    """
    Check that `tour` is a permutation of 0..n-1.
    """
    if len(tour) != n:
        raise InvalidTourError(f"Tour has {len(tour)} entries for {n} nodes")

    seen = set()
    for idx in tour:
        if isinstance(idx, bool) or not isinstance(idx, int):
            raise InvalidTourError(f"Tour index {idx!r} is not an integer")
        if not 0 <= idx < n:
            raise InvalidTourError(f"Tour index {idx} out of range 0..{n - 1}")
        if idx in seen:
            raise InvalidTourError(f"Tour index {idx} appears more than once")
        seen.add(idx)


def apply_tour(nodes: Sequence[T], tour: Sequence[int]) -> List[T]:
    """
    Reorder `nodes` by `tour` and close the loop by repeating the first node.
    """
    validate_tour(tour, len(nodes))
    loop = [nodes[i] for i in tour]
    if loop:
        loop.append(loop[0])
    return loop


def close_loop(nodes: Sequence[T]) -> List[T]:
    """Loop over `nodes` in their current order."""
    return apply_tour(nodes, list(range(len(nodes))))
