"""Generic combinators built only from a descriptor's primitives.

Each combinator takes the monad explicitly and works unchanged for every
instance. The three core ones are expressed as binding chains so they share
the translator's lowering:

- lift(n, f, m):        (a1, ..., an -> b)  =>  (m a1, ..., m an -> m b)
- sequence_all(ms, m):  [m a]               =>  m [a]
- chain_fns(fs, m):     [a -> m a]          =>  a -> m a   (Kleisli, left to right)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from monadcase.foundation.errors import ArityMismatchError, EmptyListError, InvalidChainError

from .chain import Bind, Chain
from .descriptor import UNSET, Monad
from .translator import compile_chain, lower


def _take(name: str) -> Callable[[Any], Any]:
    return lambda scope: scope[name]


def _apply_to(fn: Callable[[Any], Any], name: str) -> Callable[[Any], Any]:
    return lambda scope: fn(scope[name])


# ═════════════════════════════════════════════════════════════════════════════
# Core Combinators
# ═════════════════════════════════════════════════════════════════════════════


def lift(n: int, f: Callable[..., Any], monad: Monad) -> Callable[..., Any]:
    """Turn an n-ary plain function into one over n monadic arguments.

    The arity must be given explicitly; calling the lifted function with any
    other number of arguments raises ArityMismatchError.

    Example:
        >>> add = lift(2, lambda a, b: a + b, sequence_m)
        >>> add([1, 2], [10, 20])
        [11, 21, 12, 22]
    """
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise ArityMismatchError.create("lift", f"arity must be a non-negative integer, got {n!r}")
    if not callable(f):
        raise InvalidChainError.create("lift", f"lifted function must be callable, got {type(f).__name__}")

    entries = tuple(Bind(f"x{i}", _take(f"m{i}")) for i in range(n))
    program = compile_chain(
        Chain(entries, lambda scope: f(*(scope[f"x{i}"] for i in range(n)))),
        monad,
    )

    def lifted(*mvs: Any) -> Any:
        if len(mvs) != n:
            raise ArityMismatchError.create(
                "lift",
                f"lifted function takes {n} monadic argument{'s' if n != 1 else ''}, got {len(mvs)}",
                details=getattr(f, "__name__", repr(f)),
            )
        return program(**{f"m{i}": mv for i, mv in enumerate(mvs)})

    lifted.__name__ = f"lifted_{getattr(f, '__name__', 'fn')}"
    return lifted


def sequence_all(mvs: Sequence[Any], monad: Monad) -> Any:
    """Bind each monadic value in order and wrap the list of their values.

    An empty list yields result([]).
    """
    items = list(mvs)
    entries = tuple(Bind(f"x{i}", _take(f"m{i}")) for i in range(len(items)))
    chain = Chain(entries, lambda scope: [scope[f"x{i}"] for i in range(len(items))])
    return lower(chain, monad, **{f"m{i}": mv for i, mv in enumerate(items)})


def chain_fns(fns: Sequence[Callable[[Any], Any]], monad: Monad) -> Callable[[Any], Any]:
    """Kleisli composition of one-argument monad-producing functions, left to right.

    Raises:
        EmptyListError: If fns is empty
        InvalidChainError: If an element of fns is not callable
    """
    steps_ = list(fns)
    if not steps_:
        raise EmptyListError.create("chain_fns", "need at least one function to compose")
    for i, fn in enumerate(steps_):
        if not callable(fn):
            raise InvalidChainError.create(
                "chain_fns", f"element {i} must be callable, got {type(fn).__name__}",
            )
    entries = tuple(Bind(f"x{i + 1}", _apply_to(fn, f"x{i}")) for i, fn in enumerate(steps_))
    program = compile_chain(Chain(entries, _take(f"x{len(steps_)}")), monad)

    def chained(x0: Any) -> Any:
        return program(x0=x0)

    return chained


# ═════════════════════════════════════════════════════════════════════════════
# Derived Combinators
# ═════════════════════════════════════════════════════════════════════════════


def m_map(f: Callable[[Any], Any], xs: Sequence[Any], monad: Monad) -> Any:
    """Apply a monad-producing f to every element and sequence the results."""
    return sequence_all([f(x) for x in xs], monad)


def m_fmap(f: Callable[[Any], Any], mv: Any, monad: Monad) -> Any:
    """Apply a plain function to the value(s) inside mv."""
    return monad.bind(mv, lambda x: monad.result(f(x)))


def m_join(mmv: Any, monad: Monad) -> Any:
    """Flatten one level of nesting: m (m a) -> m a."""
    return monad.bind(mmv, lambda mv: mv)


def m_when(condition: bool, mv: Any, monad: Monad) -> Any:
    """mv if condition holds, otherwise result(None)."""
    return mv if condition else monad.result(None)


def m_when_not(condition: bool, mv: Any, monad: Monad) -> Any:
    return mv if not condition else monad.result(None)


def m_reduce(f: Callable[[Any, Any], Any], mvs: Sequence[Any], monad: Monad, initial: Any = UNSET) -> Any:
    """Fold a plain binary function over monadic values.

    Raises:
        EmptyListError: If mvs is empty and no initial value is given
    """
    items = list(mvs)
    if initial is UNSET:
        if not items:
            raise EmptyListError.create("m_reduce", "cannot reduce an empty list without an initial value")
        acc, rest = items[0], items[1:]
    else:
        acc, rest = monad.result(initial), items
    step = lift(2, f, monad)
    for mv in rest:
        acc = step(acc, mv)
    return acc


def m_until(
    done: Callable[[Any], bool],
    f: Callable[[Any], Any],
    x: Any,
    monad: Monad,
) -> Any:
    """Apply monad-producing f repeatedly, starting at x, until done(value) holds."""
    if done(x):
        return monad.result(x)
    return monad.bind(f(x), lambda y: m_until(done, f, y, monad))
