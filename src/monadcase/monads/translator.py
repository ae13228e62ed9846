"""Lowering binding chains into nested bind calls.

Lowering walks the chain right to left:

    result expression E          ->  result(E)
    Bind(name, expr) then R      ->  bind(expr, lambda name: R)
    Let(name, expr) then R       ->  R with name = expr
    Filter(pred) then R          ->  R if pred else zero

so a chain produces exactly one bind per Bind entry and one result at the
innermost position. Compilation is a pure transformation: nothing in the chain
is evaluated until the resulting Program is called, and a filter against a
monad without zero fails at compile time, before any container exists.
"""

from __future__ import annotations

from typing import Any, Callable

from monadcase.foundation.errors import InvalidChainError, MissingZeroError
from monadcase.runtime.observability import get_logger

from .chain import RESERVED_NAMES, Bind, Chain, Entry, Expr, Filter, Let, Scope
from .descriptor import Monad

Body = Callable[[Scope], Any]

log = get_logger("monadcase.translator")


# ═════════════════════════════════════════════════════════════════════════════
# Per-entry lowering
# ═════════════════════════════════════════════════════════════════════════════


def _lower_result(expr: Expr, monad: Monad) -> Body:
    return lambda scope: monad.result(expr(scope))


def _lower_bind(entry: Bind, rest: Body, monad: Monad) -> Body:
    name, expr = entry.name, entry.expr
    return lambda scope: monad.bind(expr(scope), lambda value: rest(scope.extend(name, value)))


def _lower_let(entry: Let, rest: Body) -> Body:
    name, expr = entry.name, entry.expr
    return lambda scope: rest(scope.extend(name, expr(scope)))


def _lower_filter(entry: Filter, rest: Body, monad: Monad) -> Body:
    # a fresh zero per failed predicate, never one shared object
    predicate = entry.predicate
    return lambda scope: rest(scope) if predicate(scope) else monad.zero


def _lower_entry(entry: Entry, rest: Body, monad: Monad) -> Body:
    match entry:
        case Bind():
            return _lower_bind(entry, rest, monad)
        case Let():
            return _lower_let(entry, rest)
        case Filter():
            return _lower_filter(entry, rest, monad)
    raise InvalidChainError.create("lower", f"unknown entry type {type(entry).__name__}")


# ═════════════════════════════════════════════════════════════════════════════
# Program
# ═════════════════════════════════════════════════════════════════════════════


class Program:
    """A chain lowered against one monad, ready to evaluate.

    Calling the program evaluates the chain with the given free variables in
    scope and returns the monadic value. For deferred monads (state,
    continuation) that value is itself a function awaiting its input.
    """

    __slots__ = ("_chain", "_monad", "_body")

    def __init__(self, chain: Chain, monad: Monad, body: Body) -> None:
        self._chain = chain
        self._monad = monad
        self._body = body

    @property
    def chain(self) -> Chain:
        return self._chain

    @property
    def monad(self) -> Monad:
        return self._monad

    def run(self, scope: Scope) -> Any:
        return self._body(scope)

    def __call__(self, **free_vars: Any) -> Any:
        clash = RESERVED_NAMES.intersection(free_vars)
        if clash:
            raise InvalidChainError.create("run", f"free variable names reserved by Scope: {sorted(clash)}")
        return self._body(Scope(free_vars))

    def explain(self) -> str:
        return explain(self._chain)

    def __repr__(self) -> str:
        return f"<Program {self._monad.name} binds={self._chain.bind_count}>"


def compile_chain(chain: Chain, monad: Monad) -> Program:
    """Lower a chain against a monad without evaluating anything.

    Raises:
        InvalidChainError: If the chain has no result expression
        MissingZeroError: If the chain has a filter and the monad defines no zero
    """
    if chain.result is None:
        raise InvalidChainError.create("lower", "chain has no result expression; call returning() first")
    if chain.has_filters and not monad.has_zero:
        raise MissingZeroError.create(
            "lower", "filter clauses require a monad with zero", details=f"monad={monad.name}",
        )

    body = _lower_result(chain.result, monad)
    for entry in reversed(chain.entries):
        body = _lower_entry(entry, body, monad)

    log.debug(
        "chain compiled",
        monad=monad.name,
        binds=chain.bind_count,
        entries=len(chain.entries),
        filters=chain.has_filters,
    )
    return Program(chain, monad, body)


def lower(chain: Chain, monad: Monad, **free_vars: Any) -> Any:
    """Compile and evaluate a chain, returning the monadic value."""
    return compile_chain(chain, monad)(**free_vars)


def domonad(monad: Monad, *entries: Entry, result: Expr, **free_vars: Any) -> Any:
    """Build, lower and evaluate a chain in one call.

    Example:
        >>> domonad(
        ...     sequence_m,
        ...     Bind("a", lambda s: range(5)),
        ...     Filter(lambda s: s.a % 2),
        ...     result=lambda s: 2 * s.a,
        ... )
        [2, 6]
    """
    return lower(Chain.of(*entries, result=result), monad, **free_vars)


# ═════════════════════════════════════════════════════════════════════════════
# Rendering
# ═════════════════════════════════════════════════════════════════════════════


def explain(chain: Chain) -> str:
    """Render the lowered shape of a chain.

    Expressions are opaque callables, so they are shown by position:
    e1, e2, ... for bound expressions, p1, ... for predicates and r for the result.

        >>> explain(steps().bind("a", f).when(p).returning(g))
        'bind(e1, λa → if p1 then result(r) else zero)'
    """
    text = "result(r)" if chain.result is not None else "<incomplete>"
    labels: list[str] = []
    expr_n = pred_n = 0
    for entry in chain.entries:
        if isinstance(entry, Filter):
            pred_n += 1
            labels.append(f"p{pred_n}")
        else:
            expr_n += 1
            labels.append(f"e{expr_n}")
    for entry, label in zip(reversed(chain.entries), reversed(labels)):
        match entry:
            case Bind(name=name):
                text = f"bind({label}, λ{name} → {text})"
            case Let(name=name):
                text = f"let {name} = {label} in {text}"
            case Filter():
                text = f"if {label} then {text} else zero"
    return text
