# src/specguard/drift/align.py
"""
Greedy similarity alignment of two ordered sequences.

Score of a pair = sum of the weights of the parts whose normalized text is
equal. Normalization keeps comparison operators as word tokens, so `age < 0`
and `age > 0` do not align. All pairs are sorted by (score desc, |i - j| asc, i, j) and committed
greedily when the score reaches MATCH_THRESHOLD and neither side is taken.

The constants are part of the comparison contract and are not configurable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Sequence, Tuple, TypeVar

from specguard.contract.grammar import normalize_text

CONDITION_WEIGHT = 0.6
ACTION_WEIGHT = 0.4
MATCH_THRESHOLD = 0.5
MATCH_SCORE = 1.0

T = TypeVar("T")


def similarity(pairs: Sequence[Tuple[float, str, str]]) -> float:
    """Weighted equality of normalized text parts: [(weight, left, right), ...]."""
    return sum(w for w, a, b in pairs if normalize_text(a) == normalize_text(b))


def is_exact(score: float) -> bool:
    return math.isclose(score, MATCH_SCORE)


@dataclass(frozen=True)
class AlignedPair:
    baseline: int
    candidate: int
    score: float

    @property
    def exact(self) -> bool:
        return is_exact(self.score)


@dataclass(frozen=True)
class Alignment:
    """Committed pairs (ordered by baseline index) plus the leftovers of each side."""

    pairs: Tuple[AlignedPair, ...]
    unmatched_baseline: Tuple[int, ...]
    unmatched_candidate: Tuple[int, ...]
    reordered: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def by_baseline(self) -> Dict[int, AlignedPair]:
        return {p.baseline: p for p in self.pairs}


def align(
    baseline: Sequence[T],
    candidate: Sequence[T],
    score: Callable[[T, T], float],
    threshold: float = MATCH_THRESHOLD,
) -> Alignment:
    scored: List[Tuple[float, int, int, int]] = []
    for i, a in enumerate(baseline):
        for j, b in enumerate(candidate):
            s = score(a, b)
            if s >= threshold:
                scored.append((s, abs(i - j), i, j))
    scored.sort(key=lambda t: (-t[0], t[1], t[2], t[3]))

    used_b: set = set()
    used_c: set = set()
    pairs: List[AlignedPair] = []
    for s, _, i, j in scored:
        if i in used_b or j in used_c:
            continue
        used_b.add(i)
        used_c.add(j)
        pairs.append(AlignedPair(i, j, s))
    pairs.sort(key=lambda p: p.baseline)

    return Alignment(
        pairs=tuple(pairs),
        unmatched_baseline=tuple(i for i in range(len(baseline)) if i not in used_b),
        unmatched_candidate=tuple(j for j in range(len(candidate)) if j not in used_c),
        reordered=_reordered(pairs),
    )


def _reordered(pairs: List[AlignedPair]) -> FrozenSet[int]:
    """Baseline indexes of pairs whose relative order is inverted against another pair."""
    out = set()
    for x in range(len(pairs)):
        for y in range(x + 1, len(pairs)):
            if pairs[y].candidate < pairs[x].candidate:
                out.add(pairs[x].baseline)
                out.add(pairs[y].baseline)
    return frozenset(out)
