"""Tests for Option and the built-in monad instances."""

from __future__ import annotations

import copy
import pickle

import pytest

from monadcase.foundation.errors import UndefinedOperationError
from monadcase.monads import (
    NOTHING,
    Nothing,
    Option,
    Some,
    call_cc,
    censor,
    cont_m,
    eval_state,
    exec_state,
    fetch_state,
    fetch_val,
    identity_m,
    is_absent,
    listen,
    lower,
    maybe_m,
    run_cont,
    run_state,
    sequence_m,
    set_m,
    set_val,
    state_m,
    steps,
    tell,
    update_state,
    update_val,
    with_state_field,
    writer_m,
)


# ═════════════════════════════════════════════════════════════════════════════
# Option
# ═════════════════════════════════════════════════════════════════════════════


def test_option_variants() -> None:
    assert Some(1).is_some()
    assert NOTHING.is_nothing()
    assert Nothing() is NOTHING
    assert Some(None).is_some()
    assert Some(None) != NOTHING
    assert not NOTHING
    assert Some(0)


def test_option_extraction() -> None:
    assert Some(3).unwrap() == 3
    assert NOTHING.unwrap_or(9) == 9
    assert Some(None).to_optional() is None
    assert list(Some("x")) == ["x"]
    assert list(NOTHING) == []
    with pytest.raises(UndefinedOperationError):
        NOTHING.unwrap()


def test_option_combinators() -> None:
    assert Some(2).map(lambda x: x * 3) == Some(6)
    assert NOTHING.map(lambda x: x * 3) is NOTHING
    assert Some(2).flat_map(lambda x: NOTHING) is NOTHING
    assert NOTHING.or_(Some(1)) == Some(1)
    assert Some(5).or_(Some(1)) == Some(5)


def test_option_hash_and_repr() -> None:
    assert {Some(1), Some(1), NOTHING} == {Some(1), NOTHING}
    assert repr(Some("a")) == "Some('a')"
    assert repr(NOTHING) == "Nothing"
    assert isinstance(Some(1), Option)


def test_is_absent_only_for_marker() -> None:
    assert is_absent(NOTHING)
    assert not is_absent(None)
    assert not is_absent(0)
    assert not is_absent([])


def test_nothing_survives_copy_and_pickle() -> None:
    assert copy.copy(NOTHING) is NOTHING
    assert copy.deepcopy(NOTHING) is NOTHING
    assert pickle.loads(pickle.dumps(NOTHING)) is NOTHING

    nested = copy.deepcopy([NOTHING, Some(NOTHING)])
    assert nested[0] is NOTHING
    assert is_absent(nested[1].unwrap())
    assert is_absent(pickle.loads(pickle.dumps([NOTHING]))[0])


def test_some_copies() -> None:
    original = Some([1, 2])
    deep = copy.deepcopy(original)
    assert deep == original
    assert deep.unwrap() is not original.unwrap()
    assert copy.copy(original) is original
    assert pickle.loads(pickle.dumps(Some(None))) == Some(None)


# ═════════════════════════════════════════════════════════════════════════════
# Identity / maybe / collections
# ═════════════════════════════════════════════════════════════════════════════


def test_identity() -> None:
    assert identity_m.result(3) == 3
    assert identity_m.bind(3, lambda x: x + 1) == 4
    assert not identity_m.has_zero
    assert not identity_m.has_plus


def test_maybe_plus_first_present() -> None:
    assert maybe_m.plus(NOTHING, Some(2), Some(3)) == Some(2)
    assert maybe_m.plus() is NOTHING
    assert maybe_m.bind(Some(None), lambda x: Some(x is None)) == Some(True)


def test_sequence_accepts_any_iterable() -> None:
    assert sequence_m.bind(range(3), lambda x: (x, x)) == [0, 0, 1, 1, 2, 2]
    assert sequence_m.plus([1], (2, 3), []) == [1, 2, 3]


def test_set_monad() -> None:
    assert set_m.result(1) == frozenset({1})
    assert set_m.bind({1, 2, 3}, lambda x: {x % 2}) == frozenset({0, 1})
    assert set_m.plus({1}, {1, 2}) == frozenset({1, 2})
    assert set_m.zero == frozenset()


# ═════════════════════════════════════════════════════════════════════════════
# State
# ═════════════════════════════════════════════════════════════════════════════


def test_state_helpers() -> None:
    incr = update_state(lambda s: s + 1)
    assert run_state(incr, 1) == (1, 2)
    assert eval_state(fetch_state(), 7) == 7
    assert exec_state(incr, 7) == 8
    assert run_state(state_m.result("v"), 0) == ("v", 0)


def test_state_mapping_fields() -> None:
    state = {"count": 1, "name": "x"}

    assert run_state(fetch_val("count"), state) == (1, state)
    assert fetch_val("missing")(state)[0] is None

    old, new = run_state(update_val("count", lambda c: c + 10), state)
    assert old == 1
    assert new == {"count": 11, "name": "x"}
    assert state == {"count": 1, "name": "x"}

    assert run_state(set_val("name", "y"), state)[1]["name"] == "y"


def test_with_state_field() -> None:
    incr = update_state(lambda s: s + 1)
    v, new = run_state(with_state_field("count", incr), {"count": 4, "other": True})
    assert v == 4
    assert new == {"count": 5, "other": True}


def test_state_counter_chain() -> None:
    """Label items with a running counter."""
    def labelled(item: str):
        chain = (
            steps()
            .bind("n", lambda s: update_state(lambda c: c + 1))
            .returning(lambda s: f"{s.n}:{item}")
        )
        return lower(chain, state_m)

    program = state_m.bind(labelled("a"), lambda x: state_m.bind(labelled("b"), lambda y: state_m.result([x, y])))
    assert run_state(program, 0) == (["0:a", "1:b"], 2)


# ═════════════════════════════════════════════════════════════════════════════
# Writer
# ═════════════════════════════════════════════════════════════════════════════


def test_writer_accumulates() -> None:
    w = writer_m(())
    out = w.bind(tell(("start",)), lambda _: w.bind((42, ("compute",)), lambda v: (v + 1, ("done",))))
    assert out == (43, ("start", "compute", "done"))
    assert w.result(1) == (1, ())


def test_writer_custom_combine() -> None:
    w = writer_m(0, combine=max)
    assert w.bind((1, 5), lambda v: (v, 3)) == (1, 5)
    assert w.bind((1, 5), lambda v: (v, 8)) == (1, 8)


def test_listen_and_censor() -> None:
    assert listen((1, ("a",))) == ((1, ("a",)), ("a",))
    assert censor(lambda acc: tuple(x.upper() for x in acc), (1, ("a", "b"))) == (1, ("A", "B"))


# ═════════════════════════════════════════════════════════════════════════════
# Continuation
# ═════════════════════════════════════════════════════════════════════════════


def test_cont_basic() -> None:
    mv = cont_m.bind(cont_m.result(3), lambda x: cont_m.result(x * 2))
    assert run_cont(mv) == 6
    assert run_cont(mv, str) == "6"


def test_call_cc_escapes() -> None:
    def safe_div(n: int, d: int):
        def body(escape):
            if d == 0:
                return escape("div by zero")
            return cont_m.result(n // d)
        return call_cc(body)

    assert run_cont(safe_div(10, 2)) == 5
    assert run_cont(safe_div(1, 0)) == "div by zero"

    chained = cont_m.bind(safe_div(1, 0), lambda v: cont_m.result(f"after {v}"))
    assert run_cont(chained) == "after div by zero"
