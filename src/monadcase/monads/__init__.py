"""Monad descriptors, binding chains and generic combinators.

A monad is an explicit `Monad` value passed to every operation, so several
monads can be used side by side:

Example:
    >>> from monadcase.monads import sequence_m, steps, lower
    >>>
    >>> chain = (
    ...     steps()
    ...     .bind("a", lambda s: [0, 1, 2, 3, 4])
    ...     .when(lambda s: s.a % 2 == 1)
    ...     .returning(lambda s: 2 * s.a)
    ... )
    >>> lower(chain, sequence_m)
    [2, 6]
"""

from .chain import EMPTY_SCOPE, Bind, Chain, Entry, Filter, Let, Scope, steps
from .combinators import (
    chain_fns,
    lift,
    m_fmap,
    m_join,
    m_map,
    m_reduce,
    m_until,
    m_when,
    m_when_not,
    sequence_all,
)
from .descriptor import UNSET, Monad, make_monad
from .distribution import (
    Distribution,
    Weight,
    bernoulli,
    certainly,
    choose,
    cond_dist_m,
    dist_m,
    is_normalized,
    join_with,
    normalize,
    normalize_cond,
    prob,
    select,
    total_mass,
    uniform,
    validate,
    zipf,
)
from .instances import (
    call_cc,
    censor,
    cont_m,
    eval_state,
    exec_state,
    fetch_state,
    fetch_val,
    identity_m,
    listen,
    maybe_m,
    run_cont,
    run_state,
    sequence_m,
    set_m,
    set_state,
    set_val,
    state_m,
    tell,
    update_state,
    update_val,
    with_state_field,
    writer_m,
)
from .laws import (
    LawViolation,
    check_associativity,
    check_left_identity,
    check_right_identity,
    check_zero_plus,
    verify_laws,
)
from .option import NOTHING, Nothing, Option, Some, is_absent
from .transformer import Policy, maybe_t, sequence_t, state_t, transform
from .translator import Program, compile_chain, domonad, explain, lower

__all__ = [
    # Descriptor
    "Monad", "make_monad", "UNSET",
    # Option
    "Option", "Some", "Nothing", "NOTHING", "is_absent",
    # Instances
    "identity_m", "maybe_m", "sequence_m", "set_m", "state_m", "writer_m", "cont_m",
    "run_state", "eval_state", "exec_state", "update_state", "set_state", "fetch_state",
    "fetch_val", "update_val", "set_val", "with_state_field",
    "tell", "listen", "censor", "run_cont", "call_cc",
    # Distributions
    "Distribution", "Weight", "dist_m", "cond_dist_m",
    "certainly", "uniform", "bernoulli", "choose", "zipf",
    "normalize", "normalize_cond", "is_normalized", "total_mass", "validate",
    "prob", "join_with", "select",
    # Chains & lowering
    "Chain", "Bind", "Let", "Filter", "Entry", "Scope", "EMPTY_SCOPE", "steps",
    "Program", "compile_chain", "lower", "domonad", "explain",
    # Combinators
    "lift", "sequence_all", "chain_fns",
    "m_map", "m_fmap", "m_join", "m_when", "m_when_not", "m_reduce", "m_until",
    # Transformers
    "Policy", "maybe_t", "transform", "sequence_t", "state_t",
    # Laws
    "LawViolation", "verify_laws",
    "check_left_identity", "check_right_identity", "check_associativity", "check_zero_plus",
]
