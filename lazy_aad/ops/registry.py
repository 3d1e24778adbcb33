# lazy_aad/ops/registry.py
"""
Operator registration.

An operator is a builder `build(out, *operands)` that fills a freshly created
output Variable from its operands. Every builder follows the same protocol:
the output's dependency map is the per-key concatenation of the operands'
maps, with each copied gradient expression weighted by the operator's local
derivative (addition copies them unweighted; a product would wrap each one in
a "scaled" expression by the other operand).
"""
import logging
from typing import Any, Callable, Dict, Optional

from ..core.var import Variable
from ..errors import RegistrationError, UnknownOperatorError

logger = logging.getLogger(__name__)

OperatorBuilder = Callable[..., None]

_OPERATORS: Dict[str, OperatorBuilder] = {}


def _as_var(x: Any) -> Variable:
    """Ensure x is a Variable; otherwise wrap it as a constant leaf."""
    return x if isinstance(x, Variable) else Variable(x, name="const")


def register_operator(tag: str, build: Optional[OperatorBuilder] = None, *, replace: bool = False):
    """Register `build` under `tag`; usable as a decorator."""
    def _register(fn: OperatorBuilder) -> OperatorBuilder:
        if tag in _OPERATORS and not replace:
            raise RegistrationError(f"operator {tag!r} is already registered")
        _OPERATORS[tag] = fn
        logger.debug("registered operator %r", tag)
        return fn

    if build is None:
        return _register
    return _register(build)


def get_operator(tag: str) -> OperatorBuilder:
    try:
        return _OPERATORS[tag]
    except KeyError:
        raise UnknownOperatorError(f"no operator registered for {tag!r}") from None


def registered_operators():
    return tuple(_OPERATORS)


def apply_operator(tag: str, *operands: Any, name: Optional[str] = None) -> Variable:
    """
    Create the output Variable on the active tape and let the operator fill it.

    Plain numbers among `operands` become constant leaves. The output starts as a
    0.0 leaf, so it keeps a self value-expression and d(out)/d(out) = 1.
    """
    build = get_operator(tag)
    args = tuple(_as_var(x) for x in operands)
    out = Variable(0.0, name=name)
    build(out, *args)
    return out
