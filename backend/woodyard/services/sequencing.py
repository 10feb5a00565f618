"""Stop ordering helpers. Every mutation leaves sequence numbers at 1..N."""
from collections.abc import Callable, Hashable, MutableSequence, Sequence
from typing import Any, TypeVar

T = TypeVar("T")


def renumber(stops: MutableSequence[T]) -> MutableSequence[T]:
    """Assign sequence_number 1..N in list order"""
    for idx, stop in enumerate(stops, start=1):
        if getattr(stop, "sequence_number", None) != idx:
            stop.sequence_number = idx
    return stops


def is_contiguous(stops: Sequence[Any]) -> bool:
    numbers = sorted(getattr(s, "sequence_number", 0) for s in stops)
    return numbers == list(range(1, len(stops) + 1))


def append_stop(stops: MutableSequence[T], stop: T) -> MutableSequence[T]:
    stops.append(stop)
    return renumber(stops)


def remove_stop(stops: MutableSequence[T], stop: T) -> MutableSequence[T]:
    stops.remove(stop)
    return renumber(stops)


def move_stop(stops: MutableSequence[T], from_index: int, to_index: int) -> MutableSequence[T]:
    if not 0 <= from_index < len(stops):
        raise IndexError(f"from_index {from_index} out of range")
    to_index = max(0, min(to_index, len(stops) - 1))
    stop = stops.pop(from_index)
    stops.insert(to_index, stop)
    return renumber(stops)


def reorder(
    stops: MutableSequence[T],
    ordered_ids: Sequence[Hashable],
    key: Callable[[T], Hashable] = lambda s: s.id,
) -> MutableSequence[T]:
    """Apply an explicit id order; it must be a permutation of the current ids."""
    by_id = {key(s): s for s in stops}
    if len(ordered_ids) != len(stops) or set(ordered_ids) != set(by_id):
        raise ValueError("ordered ids must list every stop exactly once")
    stops[:] = [by_id[i] for i in ordered_ids]
    return renumber(stops)
