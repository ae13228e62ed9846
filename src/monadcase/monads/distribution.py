"""Finite probability distributions as a monad.

A distribution is a plain mapping {outcome: weight} with strictly positive
weights. `bind` never mutates its inputs: every call builds a fresh dict in
which the mass p*q of each path x -> y is added to whatever y already holds.
Summing (never overwriting) duplicate outcomes is what makes

    dist_m.bind(uniform(range(1, 7)), lambda a:
        dist_m.bind(uniform(range(1, 7)), lambda b: certainly(a + b)))

give 1/6 at 7 rather than 1/36.

Weights are Fractions by default so results compare exactly; set
MONADCASE_DIST_EXACT=false to build floats instead.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Hashable, Iterable, Mapping
from fractions import Fraction
from typing import Any, TypeAlias

from monadcase.foundation.config import get_settings
from monadcase.foundation.errors import InvalidDistributionError
from monadcase.runtime.observability import get_logger

from .descriptor import Monad

Weight: TypeAlias = Fraction | float | int
Distribution: TypeAlias = dict[Hashable, Weight]

log = get_logger("monadcase.distribution")


def _ratio(num: int, den: int) -> Weight:
    return Fraction(num, den) if get_settings().distribution.exact else num / den


# ═════════════════════════════════════════════════════════════════════════════
# Monad Instances
# ═════════════════════════════════════════════════════════════════════════════


def _dist_result(v: Hashable) -> Distribution:
    return {v: 1}


def _dist_bind(mv: Mapping[Hashable, Weight], f: Callable[[Any], Mapping[Hashable, Weight]]) -> Distribution:
    out: Distribution = {}
    for x, p in mv.items():
        for y, q in f(x).items():
            out[y] = out.get(y, 0) + p * q
    return out


def _cond_plus(*mvs: Mapping[Hashable, Weight]) -> Distribution:
    """First non-empty distribution among the alternatives."""
    return next((dict(mv) for mv in mvs if mv), {})


dist_m = Monad.create("distribution", result=_dist_result, bind=_dist_bind)

# Same bind, plus {} as zero: filter clauses discard mass, normalize_cond restores it
cond_dist_m = Monad.create(
    "conditional-distribution",
    result=_dist_result,
    bind=_dist_bind,
    zero={},
    plus=_cond_plus,
)


# ═════════════════════════════════════════════════════════════════════════════
# Constructors
# ═════════════════════════════════════════════════════════════════════════════


def certainly(v: Hashable) -> Distribution:
    return {v: 1}


def uniform(values: Iterable[Hashable]) -> Distribution:
    """Equal weight for every element; repeated elements accumulate their shares.

    Raises:
        InvalidDistributionError: If values is empty
    """
    items = list(values)
    if not items:
        raise InvalidDistributionError.create("uniform", "cannot build a distribution over no outcomes")
    share = _ratio(1, len(items))
    out: Distribution = {}
    for v in items:
        out[v] = out.get(v, 0) + share
    return out


def bernoulli(p: Weight) -> Distribution:
    """1 with probability p, 0 otherwise. Zero-weight outcomes are omitted."""
    if not 0 <= p <= 1:
        raise InvalidDistributionError.create("bernoulli", f"probability must lie in [0, 1], got {p}")
    return {k: w for k, w in ((1, p), (0, 1 - p)) if w > 0}


def choose(*choices: tuple[Weight, Hashable], otherwise: Hashable | None = None) -> Distribution:
    """Explicit (probability, outcome) pairs; leftover mass goes to `otherwise`.

    Example:
        >>> choose((Fraction(1, 4), "a"), (Fraction(1, 4), "b"), otherwise="c")
        {'a': Fraction(1, 4), 'b': Fraction(1, 4), 'c': Fraction(1, 2)}
    """
    out: Distribution = {}
    for p, v in choices:
        if p <= 0:
            raise InvalidDistributionError.create("choose", f"weight for {v!r} must be positive, got {p}")
        out[v] = out.get(v, 0) + p
    remaining = 1 - sum(out.values())
    if remaining < 0:
        raise InvalidDistributionError.create("choose", "weights sum to more than 1")
    if remaining > 0:
        if otherwise is None:
            raise InvalidDistributionError.create("choose", "weights sum to less than 1 and no 'otherwise' outcome")
        out[otherwise] = out.get(otherwise, 0) + remaining
    return out


def zipf(s: int | float, n: int) -> Distribution:
    """Zipf law over ranks 1..n with exponent s."""
    if n < 1:
        raise InvalidDistributionError.create("zipf", f"need at least one rank, got n={n}")
    exact = get_settings().distribution.exact and isinstance(s, int) and s >= 0
    raw = {k: (Fraction(1, k**s) if exact else 1 / k**s) for k in range(1, n + 1)}
    return normalize(raw)


# ═════════════════════════════════════════════════════════════════════════════
# Utilities
# ═════════════════════════════════════════════════════════════════════════════


def total_mass(dist: Mapping[Hashable, Weight]) -> Weight:
    return sum(dist.values(), 0)


def validate(dist: Mapping[Hashable, Weight]) -> Mapping[Hashable, Weight]:
    """Return dist unchanged if it is non-empty with strictly positive weights.

    Raises:
        InvalidDistributionError: On an empty mapping or a weight <= 0
    """
    if not dist:
        raise InvalidDistributionError.create("validate", "distribution has no outcomes")
    bad = [k for k, w in dist.items() if not w > 0]
    if bad:
        raise InvalidDistributionError.create("validate", "weights must be strictly positive", details=repr(bad[:5]))
    return dist


def normalize(dist: Mapping[Hashable, Weight]) -> Distribution:
    """Scale weights so they sum to 1."""
    total = total_mass(validate(dist))
    return {k: w / total for k, w in dist.items()}


def normalize_cond(dist: Mapping[Hashable, Weight]) -> Distribution:
    """Renormalize the output of a cond_dist_m computation after filters removed mass.

    Raises:
        InvalidDistributionError: If every outcome was filtered away
    """
    if not dist:
        raise InvalidDistributionError.create("normalize_cond", "all outcomes were excluded by filters")
    kept = total_mass(dist)
    log.debug("conditioning", outcomes=len(dist), kept_mass=float(kept))
    return normalize(dist)


def is_normalized(dist: Mapping[Hashable, Weight], tolerance: float | None = None) -> bool:
    """True when all weights are positive and they sum to 1 (within tolerance for floats)."""
    if not dist or any(not w > 0 for w in dist.values()):
        return False
    total = total_mass(dist)
    if isinstance(total, (Fraction, int)):
        return total == 1
    tol = tolerance if tolerance is not None else get_settings().distribution.tolerance
    return abs(total - 1) <= tol


def prob(predicate: Callable[[Any], bool], dist: Mapping[Hashable, Weight]) -> Weight:
    """Total weight of the outcomes satisfying predicate."""
    return sum((w for k, w in dist.items() if predicate(k)), 0)


def join_with(
    f: Callable[[Any, Any], Hashable],
    d1: Mapping[Hashable, Weight],
    d2: Mapping[Hashable, Weight],
) -> Distribution:
    """Distribution of f(x, y) for independent x ~ d1 and y ~ d2."""
    return _dist_bind(d1, lambda x: _dist_bind(d2, lambda y: _dist_result(f(x, y))))


def select(dist: Mapping[Hashable, Weight], rng: random.Random | None = None) -> Hashable:
    """Draw one outcome with probability proportional to its weight."""
    validate(dist)
    draw = (rng or random.Random()).random() * float(total_mass(dist))
    cumulative = 0.0
    last: Hashable = None
    for k, w in dist.items():
        cumulative += float(w)
        last = k
        if draw < cumulative:
            return k
    return last
