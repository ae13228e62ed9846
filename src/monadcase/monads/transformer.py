"""Monad transformers: descriptors derived from a base descriptor.

A transformer never unwraps the base container itself. It only changes the
continuation handed to the base bind, because the base bind is the one piece
of code that knows how to open the container:

    maybe_t(M).bind(mv, f) = M.bind(mv, lambda x: M.result(NOTHING) if x is NOTHING else f(x))

When the base already has zero/plus, the transformed monad has two candidate
pairs. The caller picks one with `Policy.USE_BASE` / `Policy.USE_OWN`; zero and
plus always come from the same pair, so naming two different sources raises
MalformedDescriptorError. An unnamed side follows the named one, and when
neither is named the MONADCASE_TRANSFORMER_* settings decide. Their default
"auto" picks the base pair when the base defines both operations and the
transformer's own pair otherwise.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Callable

from monadcase.foundation.config import get_settings
from monadcase.foundation.errors import MalformedDescriptorError, UndefinedOperationError
from monadcase.runtime.observability import get_logger

from .combinators import m_fmap, sequence_all
from .descriptor import UNSET, Monad
from .option import NOTHING

log = get_logger("monadcase.transformer")


class Policy(StrEnum):
    """Which zero/plus the transformed monad uses."""
    USE_BASE = "base"
    USE_OWN = "own"


def _requested(requested: Policy | str | None, configured: str) -> Policy | None:
    choice = requested if requested is not None else configured
    return None if choice == "auto" else Policy(choice)


def _resolve(
    base: Monad,
    zero_policy: Policy | str | None,
    plus_policy: Policy | str | None,
) -> Policy:
    settings = get_settings().transformer
    zp = _requested(zero_policy, settings.zero_policy)
    pp = _requested(plus_policy, settings.plus_policy)
    if zp is not None and pp is not None and zp is not pp:
        raise MalformedDescriptorError.create(
            "transform", f"zero policy {zp.name} and plus policy {pp.name} must name the same source",
        )
    policy = zp or pp
    base_has_both = base.has_zero and base.has_plus
    if policy is None:
        return Policy.USE_BASE if base_has_both else Policy.USE_OWN
    if policy is Policy.USE_BASE and not base_has_both:
        missing = " or ".join(
            label for label, has in (("zero", base.has_zero), ("plus", base.has_plus)) if not has
        )
        raise UndefinedOperationError.create(
            "transform", f"policy USE_BASE requested but base monad '{base.name}' defines no {missing}",
        )
    return policy


def _derive(
    name: str,
    base: Monad,
    result: Callable[[Any], Any],
    bind: Callable[[Any, Callable[[Any], Any]], Any],
    own_zero: Any,
    own_plus: Callable[..., Any],
    zero_policy: Policy | str | None,
    plus_policy: Policy | str | None,
) -> Monad:
    # zero and plus come from one source
    policy = _resolve(base, zero_policy, plus_policy)
    log.debug("transformer policy resolved", monad=name, policy=policy.value)
    if policy is Policy.USE_BASE:
        return Monad.create(name, result=result, bind=bind, zero=base.zero, plus=base.plus_option.unwrap())
    return Monad.create(name, result=result, bind=bind, zero=own_zero, plus=own_plus)


# ═════════════════════════════════════════════════════════════════════════════
# Maybe Transformer
# ═════════════════════════════════════════════════════════════════════════════


def maybe_t(
    base: Monad,
    zero_policy: Policy | str | None = None,
    plus_policy: Policy | str | None = None,
) -> Monad:
    """Add short-circuit-on-NOTHING to an arbitrary base monad.

    Values inside the base container may be NOTHING; the continuation is
    skipped for them and NOTHING is re-wrapped with the base result.

    Example:
        >>> m = maybe_t(sequence_m)
        >>> m.bind([1, NOTHING, 3], lambda x: [x * 10])
        [10, Nothing, 30]

    Raises:
        UndefinedOperationError: If USE_BASE is requested for an operation the base lacks
        MalformedDescriptorError: If zero and plus policies name different sources
    """
    def absent() -> Any:
        return base.result(NOTHING)

    def bind(mv: Any, f: Callable[[Any], Any]) -> Any:
        return base.bind(mv, lambda x: absent() if x is NOTHING else f(x))

    def own_plus(*mvs: Any) -> Any:
        # First non-absent value, sequenced through the base bind
        if not mvs:
            return absent()
        first, rest = mvs[0], mvs[1:]
        return base.bind(first, lambda v: own_plus(*rest) if v is NOTHING else base.result(v))

    return _derive(f"maybe-t({base.name})", base, base.result, bind, absent(), own_plus, zero_policy, plus_policy)


transform = maybe_t


# ═════════════════════════════════════════════════════════════════════════════
# Sequence Transformer
# ═════════════════════════════════════════════════════════════════════════════


def _flatten(xss: list[list[Any]]) -> list[Any]:
    return [x for xs in xss for x in xs]


def sequence_t(
    base: Monad,
    zero_policy: Policy | str | None = None,
    plus_policy: Policy | str | None = None,
) -> Monad:
    """Multiple results (a list) inside an arbitrary base monad.

    Example:
        >>> m = sequence_t(maybe_m)
        >>> m.bind(Some([1, 2]), lambda x: Some([x, -x]))
        Some([1, -1, 2, -2])
    """
    def bind(mv: Any, f: Callable[[Any], Any]) -> Any:
        return base.bind(mv, lambda xs: m_fmap(_flatten, sequence_all([f(x) for x in xs], base), base))

    def own_plus(*mvs: Any) -> Any:
        return m_fmap(_flatten, sequence_all(mvs, base), base)

    return _derive(
        f"sequence-t({base.name})", base, lambda v: base.result([v]), bind,
        base.result([]), own_plus, zero_policy, plus_policy,
    )


# ═════════════════════════════════════════════════════════════════════════════
# State Transformer
# ═════════════════════════════════════════════════════════════════════════════


def state_t(base: Monad) -> Monad:
    """State threading over an arbitrary base monad: values are s -> base((v, s)).

    Zero and plus exist only when the base defines them; they act on every
    state, e.g. state_t(sequence_m) forks the state for each alternative.
    """
    def result(v: Any) -> Callable[[Any], Any]:
        return lambda s: base.result((v, s))

    def bind(mv: Callable[[Any], Any], f: Callable[[Any], Any]) -> Callable[[Any], Any]:
        return lambda s: base.bind(mv(s), lambda vs: f(vs[0])(vs[1]))

    zero = (lambda s: base.zero) if base.has_zero else UNSET
    plus = (
        (lambda *mvs: (lambda s: base.plus(*(mv(s) for mv in mvs))))
        if base.has_plus else None
    )
    return Monad.create(f"state-t({base.name})", result=result, bind=bind, zero=zero, plus=plus)
