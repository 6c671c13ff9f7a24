"""Variant combination generation.

Enumerates every total assignment of one value per attribute key — the
Cartesian product of the supplied option sequences. Keys are walked in the
mapping's iteration order and values in sequence order, with the last key
varying fastest, so callers that pre-sort attributes by ``sort_order`` get a
stable combination order across runs.

No capping is applied here; callers bound attribute and option counts.
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Iterator, Mapping, Sequence
from typing import TypeVar

V = TypeVar("V")


def iter_variant_combinations(attributes: Mapping[str, Sequence[V]]) -> Iterator[dict[str, V]]:
    """Lazily yield each combination as a fresh dict.

    An empty mapping yields exactly one empty combination; any key with no
    values yields nothing.
    """
    keys = list(attributes)
    for values in itertools.product(*(attributes[key] for key in keys)):
        yield dict(zip(keys, values))


def generate_variant_combinations(attributes: Mapping[str, Sequence[V]]) -> list[dict[str, V]]:
    return list(iter_variant_combinations(attributes))


def count_variant_combinations(attributes: Mapping[str, Sequence[V]]) -> int:
    """Number of combinations :func:`iter_variant_combinations` would yield."""
    return math.prod(len(values) for values in attributes.values())
