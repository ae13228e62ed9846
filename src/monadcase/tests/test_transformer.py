"""Tests for maybe_t, sequence_t and state_t, including zero/plus policy resolution."""

from __future__ import annotations

import pytest

from monadcase.foundation.config import clear_settings_cache
from monadcase.foundation.errors import MalformedDescriptorError, MissingZeroError, UndefinedOperationError
from monadcase.monads import (
    NOTHING,
    Bind,
    Chain,
    Filter,
    Policy,
    Some,
    check_zero_plus,
    identity_m,
    lift,
    lower,
    maybe_m,
    maybe_t,
    sequence_m,
    sequence_t,
    state_m,
    state_t,
    transform,
    writer_m,
)


# ═════════════════════════════════════════════════════════════════════════════
# maybe_t: short-circuit inside an arbitrary base
# ═════════════════════════════════════════════════════════════════════════════


def test_maybe_t_over_sequence_skips_absent() -> None:
    """Absent elements are re-wrapped, never passed to the continuation."""
    m = maybe_t(sequence_m)
    seen: list[int] = []

    def f(x: int) -> list[int]:
        seen.append(x)
        return [x * 10]

    assert m.bind([1, NOTHING, 3], f) == [10, NOTHING, 30]
    assert seen == [1, 3]
    assert m.name == "maybe-t(sequence)"
    assert transform is maybe_t


def test_maybe_t_result_is_base_result() -> None:
    assert maybe_t(sequence_m).result(4) == [4]
    assert maybe_t(identity_m).result(4) == 4


def test_maybe_t_over_identity_behaves_like_maybe() -> None:
    m = maybe_t(identity_m)
    assert m.bind(5, lambda x: x + 1) == 6
    assert m.bind(NOTHING, lambda x: x + 1) is NOTHING


def test_maybe_t_over_writer_keeps_log() -> None:
    """The base accumulator survives a short-circuit."""
    w = writer_m(())
    m = maybe_t(w)
    mv = (NOTHING, ("looked up key",))
    assert m.bind(mv, lambda x: (x + 1, ("incremented",))) == (NOTHING, ("looked up key",))
    assert m.bind((1, ("a",)), lambda x: (x + 1, ("b",))) == (2, ("a", "b"))


def test_maybe_t_chain_and_lift() -> None:
    m = maybe_t(sequence_m)
    chain = Chain.of(
        Bind("a", lambda s: [1, NOTHING, 2]),
        Bind("b", lambda s: [s.a * 100]),
        result=lambda s: s.b + 1,
    )
    assert lower(chain, m) == [101, NOTHING, 201]

    add = lift(2, lambda a, b: a + b, m)
    assert add([1, NOTHING], [10]) == [11, NOTHING]


# ═════════════════════════════════════════════════════════════════════════════
# Zero / plus policies
# ═════════════════════════════════════════════════════════════════════════════


def test_default_policy_uses_base_when_available() -> None:
    m = maybe_t(sequence_m)
    assert m.zero == []
    assert m.plus([1], [NOTHING, 2]) == [1, NOTHING, 2]

    chain = Chain.of(Bind("a", lambda s: [1, 2, 3]), Filter(lambda s: s.a != 2), result=lambda s: s.a)
    assert lower(chain, m) == [1, 3]


def test_use_own_policy() -> None:
    m = maybe_t(sequence_m, zero_policy=Policy.USE_OWN, plus_policy=Policy.USE_OWN)
    assert m.zero == [NOTHING]

    chain = Chain.of(Bind("a", lambda s: [1, 2, 3]), Filter(lambda s: s.a != 2), result=lambda s: s.a)
    assert lower(chain, m) == [1, NOTHING, 3]


def test_own_plus_picks_first_present() -> None:
    m = maybe_t(identity_m)
    assert m.plus(NOTHING, 5, 7) == 5
    assert m.plus(NOTHING, NOTHING) is NOTHING
    assert m.plus() is NOTHING


def test_base_without_zero_falls_back_to_own() -> None:
    """identity has no zero/plus, so the transformer supplies them."""
    m = maybe_t(identity_m)
    assert m.has_zero
    assert m.zero is NOTHING

    chain = Chain.of(Bind("a", lambda s: 4), Filter(lambda s: s.a > 10), result=lambda s: s.a)
    assert lower(chain, m) is NOTHING


def test_maybe_t_over_state_gains_zero() -> None:
    """Filtering over plain state is an error; under maybe_t it yields an absent value."""
    chain = Chain.of(Bind("a", lambda s: state_m.result(1)), Filter(lambda s: False), result=lambda s: s.a)
    with pytest.raises(MissingZeroError):
        lower(chain, state_m)

    computation = lower(chain, maybe_t(state_m))
    assert computation("st") == (NOTHING, "st")


def test_explicit_use_base_without_base_operation() -> None:
    with pytest.raises(UndefinedOperationError, match="zero"):
        maybe_t(state_m, zero_policy=Policy.USE_BASE)
    with pytest.raises(UndefinedOperationError, match="plus"):
        maybe_t(identity_m, plus_policy=Policy.USE_BASE)


def test_policy_accepts_strings() -> None:
    own = maybe_t(sequence_m, zero_policy="own", plus_policy="own")
    assert own.zero == [NOTHING]
    assert own.plus([NOTHING], [2]) == [2]

    base = maybe_t(sequence_m, zero_policy="base", plus_policy="base")
    assert base.zero == []
    assert base.plus([1], [2]) == [1, 2]


@pytest.mark.parametrize("zero_policy, plus_policy", [
    (Policy.USE_OWN, Policy.USE_BASE),
    ("base", "own"),
])
def test_mixed_policies_rejected(zero_policy: str, plus_policy: str) -> None:
    with pytest.raises(MalformedDescriptorError, match="same source"):
        maybe_t(sequence_m, zero_policy=zero_policy, plus_policy=plus_policy)


@pytest.mark.parametrize("zero_policy, plus_policy", [
    (None, None),
    (Policy.USE_OWN, Policy.USE_OWN),
    (Policy.USE_BASE, Policy.USE_BASE),
    ("own", None),
    (None, "own"),
    ("base", None),
    (None, "base"),
])
def test_every_allowed_policy_pair_keeps_zero_plus_law(zero_policy: str | None, plus_policy: str | None) -> None:
    m = maybe_t(sequence_m, zero_policy=zero_policy, plus_policy=plus_policy)
    for sample in ([1], [], [NOTHING, 2], [NOTHING]):
        assert check_zero_plus(m, sample) is None

    s = sequence_t(maybe_m, zero_policy=zero_policy, plus_policy=plus_policy)
    for sample in (Some([1]), Some([]), NOTHING):
        assert check_zero_plus(s, sample) is None


def test_unnamed_policy_follows_named_one() -> None:
    assert maybe_t(sequence_m, zero_policy=Policy.USE_OWN).zero == [NOTHING]
    assert maybe_t(sequence_m, zero_policy=Policy.USE_OWN).plus([NOTHING], [3]) == [3]
    assert maybe_t(sequence_m, plus_policy=Policy.USE_OWN).zero == [NOTHING]


def test_own_pair_over_base_without_zero_plus_is_lawful() -> None:
    m = maybe_t(identity_m, zero_policy=Policy.USE_OWN)
    for sample in (5, NOTHING, None):
        assert check_zero_plus(m, sample) is None


def test_own_zero_is_not_shared() -> None:
    m = maybe_t(sequence_m, zero_policy=Policy.USE_OWN)
    m.zero.append("extra")
    assert m.zero == [NOTHING]


def test_unknown_policy_string() -> None:
    with pytest.raises(ValueError):
        maybe_t(sequence_m, zero_policy="sometimes")


def test_policy_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONADCASE_TRANSFORMER_ZERO_POLICY", "own")
    clear_settings_cache()

    assert maybe_t(sequence_m).zero == [NOTHING]
    assert maybe_t(sequence_m, zero_policy=Policy.USE_BASE).zero == []


def test_policy_from_settings_base_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONADCASE_TRANSFORMER_PLUS_POLICY", "base")
    clear_settings_cache()

    with pytest.raises(UndefinedOperationError):
        maybe_t(identity_m)


def test_configured_zero_policy_carries_plus_along(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONADCASE_TRANSFORMER_ZERO_POLICY", "own")
    clear_settings_cache()

    m = maybe_t(sequence_m)
    assert m.plus([NOTHING], [1]) == [1]
    assert check_zero_plus(m, [1]) is None
    assert check_zero_plus(m, [NOTHING, 2]) is None


def test_configured_policies_disagree(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONADCASE_TRANSFORMER_ZERO_POLICY", "own")
    monkeypatch.setenv("MONADCASE_TRANSFORMER_PLUS_POLICY", "base")
    clear_settings_cache()

    with pytest.raises(MalformedDescriptorError):
        maybe_t(sequence_m)


# ═════════════════════════════════════════════════════════════════════════════
# sequence_t / state_t
# ═════════════════════════════════════════════════════════════════════════════


def test_sequence_t_over_maybe() -> None:
    m = sequence_t(maybe_m)
    assert m.result(3) == Some([3])
    assert m.bind(Some([1, 2]), lambda x: Some([x, -x])) == Some([1, -1, 2, -2])
    assert m.bind(Some([1, 2]), lambda x: NOTHING if x == 2 else Some([x])) is NOTHING
    assert m.bind(NOTHING, lambda x: Some([x])) is NOTHING


def test_sequence_t_zero_and_plus() -> None:
    base_zero = sequence_t(maybe_m)
    assert base_zero.zero is NOTHING

    own = sequence_t(maybe_m, zero_policy=Policy.USE_OWN, plus_policy=Policy.USE_OWN)
    assert own.zero == Some([])
    assert own.plus(Some([1]), Some([2, 3])) == Some([1, 2, 3])
    assert own.plus(Some([1]), NOTHING) is NOTHING

    chain = Chain.of(Bind("a", lambda s: Some([1, 2, 3])), Filter(lambda s: s.a % 2), result=lambda s: s.a)
    assert lower(chain, own) == Some([1, 3])


def test_state_t_over_sequence_forks_state() -> None:
    m = state_t(sequence_m)

    def choose_step(s: int) -> list[tuple[int, int]]:
        return [(1, s + 1), (2, s + 2)]

    chain = Chain.of(
        Bind("a", lambda s: choose_step),
        Bind("b", lambda s: choose_step),
        Filter(lambda s: s.a + s.b != 3),
        result=lambda s: (s.a, s.b),
    )
    computation = lower(chain, m)
    assert computation(0) == [((1, 1), 2), ((2, 2), 4)]


def test_state_t_zero_plus_follow_base() -> None:
    over_sequence = state_t(sequence_m)
    assert over_sequence.has_zero and over_sequence.has_plus
    assert over_sequence.zero(5) == []
    forked = over_sequence.plus(over_sequence.result("x"), over_sequence.result("y"))
    assert forked(0) == [("x", 0), ("y", 0)]

    over_identity = state_t(identity_m)
    assert not over_identity.has_zero
    with pytest.raises(UndefinedOperationError):
        over_identity.plus()
