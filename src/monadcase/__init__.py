"""monadcase: explicit monad descriptors, binding-chain lowering and transformers.

Core pieces:
- Monad: a descriptor bundling result, bind and optional zero/plus
- Chain / lower: sequential bindings with filters, lowered into nested binds
- lift, sequence_all, chain_fns: combinators that work for any descriptor
- maybe_t: short-circuit-on-absence layered over any base monad
- dist_m: finite probability distributions with exact aggregation
"""

from .foundation.config import MonadcaseSettings, clear_settings_cache, get_settings
from .foundation.errors import (
    ArityMismatchError,
    EmptyListError,
    ErrorCode,
    InvalidChainError,
    InvalidDistributionError,
    MalformedDescriptorError,
    MissingZeroError,
    MonadError,
    MonadFault,
    UndefinedOperationError,
)
from .monads import (
    NOTHING,
    Bind,
    Chain,
    Filter,
    Let,
    Monad,
    Nothing,
    Option,
    Policy,
    Program,
    Scope,
    Some,
    certainly,
    chain_fns,
    compile_chain,
    cond_dist_m,
    cont_m,
    dist_m,
    domonad,
    explain,
    identity_m,
    lift,
    lower,
    make_monad,
    maybe_m,
    maybe_t,
    normalize,
    sequence_all,
    sequence_m,
    sequence_t,
    set_m,
    state_m,
    state_t,
    steps,
    transform,
    uniform,
    verify_laws,
    writer_m,
)
from .runtime.observability import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    # Descriptor & Option
    "Monad", "make_monad", "Option", "Some", "Nothing", "NOTHING",
    # Instances
    "identity_m", "maybe_m", "sequence_m", "set_m", "state_m", "writer_m", "cont_m",
    "dist_m", "cond_dist_m", "uniform", "certainly", "normalize",
    # Chains
    "Chain", "Bind", "Let", "Filter", "Scope", "steps",
    "Program", "compile_chain", "lower", "domonad", "explain",
    # Combinators
    "lift", "sequence_all", "chain_fns",
    # Transformers
    "Policy", "maybe_t", "transform", "sequence_t", "state_t",
    "verify_laws",
    # Errors
    "ErrorCode", "MonadFault", "MonadError", "MalformedDescriptorError", "MissingZeroError",
    "ArityMismatchError", "EmptyListError", "UndefinedOperationError",
    "InvalidDistributionError", "InvalidChainError",
    # Config & logging
    "MonadcaseSettings", "get_settings", "clear_settings_cache",
    "configure_logging", "get_logger",
]
