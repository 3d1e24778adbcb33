# lazy_aad/core/__init__.py

"""
Core public API for the lazy AAD package.

Exports:
    Variable         : Graph node holding lazy value- and gradient-expressions.
    Expression       : Tagged deferred computation over up to two operands.
    Tape, Handle     : Arena of variables and the stable identity it hands out.
    global_tape      : The default tape new variables register on.
    use_tape         : Context manager to temporarily switch the active tape.
    CachedEvaluator  : Memoized evaluation, invalidated on set_value.
    evaluate_value   : Reference or memoized value, per engine config.
    evaluate_gradient: Reference or memoized partial derivative, per engine config.
    grad, grads      : Convenience drivers returning partials of f.
    value            : Convenience: extract the value from a Variable.
"""

from .expression import Expression, register_expression_rule
from .var import Variable
from .tape import Handle, Tape, global_tape, use_tape
from .engine import CachedEvaluator, evaluate_value, evaluate_gradient
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Expression", "register_expression_rule",
    "Variable",
    "Handle", "Tape", "global_tape", "use_tape",
    "CachedEvaluator", "evaluate_value", "evaluate_gradient",
    "grad", "grads", "grads_list", "value",
]
