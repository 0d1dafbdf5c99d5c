"""
Sorting utilities
=================

Small, explicit sorting primitives used by the aggregations.

Included:
- Merge Sort (stable, O(n log n)) - used for rankings, where ties must keep
  a well-defined order
- Quick Sort (in-place partitioning, average O(n log n)) - used for
  distinct keys such as years and biome names
- rank_by_count: descending-by-count ranking with an alphabetical tie-break

Ordering is always passed in through `key` and `reverse`, so the same code
sorts years, strings and (name, count) pairs.
"""

from __future__ import annotations
from typing import Dict, List, Callable, Mapping, Tuple, TypeVar

T = TypeVar("T")

def merge_sort(arr: List[T], key: Callable[[T], object] = lambda x: x, reverse: bool = False) -> List[T]:
    """Stable merge sort."""
    if len(arr) <= 1:
        return arr[:]
    mid = len(arr) // 2
    left = merge_sort(arr[:mid], key=key, reverse=reverse)
    right = merge_sort(arr[mid:], key=key, reverse=reverse)
    return _merge(left, right, key=key, reverse=reverse)

def _merge(left: List[T], right: List[T], key: Callable[[T], object], reverse: bool) -> List[T]:
    out: List[T] = []
    # i and j are pointers into each sorted list
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = key(left[i]), key(right[j])
        # on equal keys the left element wins in both directions (stability)
        take_left = (a >= b) if reverse else (a <= b)
        if take_left:
            out.append(left[i]); i += 1
        else:
            out.append(right[j]); j += 1
    out.extend(left[i:])
    out.extend(right[j:])
    return out

def quick_sort(arr: List[T], key: Callable[[T], object] = lambda x: x, reverse: bool = False) -> List[T]:
    """Quick sort (in-place on a copy). Not stable."""
    a = arr[:]
    _quick_sort_inplace(a, 0, len(a) - 1, key, reverse)
    return a

def _quick_sort_inplace(a: List[T], lo: int, hi: int, key: Callable[[T], object], reverse: bool) -> None:
    while lo < hi:
        p = _partition(a, lo, hi, key, reverse)
        # recurse into the smaller side, loop on the larger one
        if p - lo < hi - p:
            _quick_sort_inplace(a, lo, p - 1, key, reverse)
            lo = p + 1
        else:
            _quick_sort_inplace(a, p + 1, hi, key, reverse)
            hi = p - 1

def _partition(a: List[T], lo: int, hi: int, key: Callable[[T], object], reverse: bool) -> int:
    # median position as pivot, so already-sorted input stays O(n log n)
    mid = (lo + hi) // 2
    a[mid], a[hi] = a[hi], a[mid]
    pivot = key(a[hi])
    i = lo
    for j in range(lo, hi):
        v = key(a[j])
        cond = (v >= pivot) if reverse else (v <= pivot)
        if cond:
            a[i], a[j] = a[j], a[i]
            i += 1
    a[i], a[hi] = a[hi], a[i]
    return i

def rank_by_count(counts: Mapping[str, int], n: int) -> Dict[str, int]:
    """Return the `n` largest entries of `counts`, largest first.

    Equal counts are ordered alphabetically by name: the pairs are first
    sorted by name, then merge sort (stable) orders them by count.
    """
    if n <= 0:
        return {}
    pairs: List[Tuple[str, int]] = quick_sort(list(counts.items()), key=lambda kv: kv[0])
    ranked = merge_sort(pairs, key=lambda kv: kv[1], reverse=True)
    return dict(ranked[:n])
