# lazy_aad/core/expression.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional

from ..errors import RegistrationError, UnknownOperatorError

logger = logging.getLogger(__name__)

# rule(expression, read) -> float, where read(variable) yields an operand's value
ExpressionRule = Callable[["Expression", Callable[[Any], float]], float]

_EXPRESSION_RULES: Dict[str, ExpressionRule] = {}


def _live_value(var) -> float:
    return var.get_value()


@dataclass(frozen=True, eq=False)
class Expression:
    """
    A deferred scalar computation over up to two operand variables.

    Attributes
    ----------
    op_tag : str
        Name of the registered rule that gives this expression its meaning
        (e.g., "literal", "const_one", "value_of").
    x, y : Variable | None
        Operand references. These are live references, not snapshots: every
        evaluation re-reads the operands' current state, so calling
        `set_value` on an operand after it was captured changes the result.
    inner : Expression | None
        Nested expression, used by weighting rules such as "scaled".
    """
    op_tag: str
    x: Any = None
    y: Any = None
    inner: Optional["Expression"] = None

    def evaluate(self, read: Optional[Callable[[Any], float]] = None) -> float:
        """Evaluate the expression; `read` overrides how operand values are obtained."""
        rule = expression_rule(self.op_tag)
        return float(rule(self, read or _live_value))

    def operands(self) -> Iterator[Any]:
        for operand in (self.x, self.y):
            if operand is not None:
                yield operand

    def __repr__(self):
        parts = [repr(self.op_tag)]
        for label, operand in (("x", self.x), ("y", self.y)):
            if operand is not None:
                parts.append(f"{label}={operand.handle.index}")
        if self.inner is not None:
            parts.append(f"inner={self.inner!r}")
        return f"Expression({', '.join(parts)})"


def register_expression_rule(tag: str, rule: Optional[ExpressionRule] = None, *, replace: bool = False):
    """
    Register the evaluation rule for an expression tag.

    Usable directly, ``register_expression_rule("neg", rule)``, or as a
    decorator, ``@register_expression_rule("neg")``.
    """
    def _register(fn: ExpressionRule) -> ExpressionRule:
        if tag in _EXPRESSION_RULES and not replace:
            raise RegistrationError(f"expression rule {tag!r} is already registered")
        _EXPRESSION_RULES[tag] = fn
        logger.debug("registered expression rule %r", tag)
        return fn

    if rule is None:
        return _register
    return _register(rule)


def expression_rule(tag: str) -> ExpressionRule:
    try:
        return _EXPRESSION_RULES[tag]
    except KeyError:
        raise UnknownOperatorError(f"no expression rule registered for {tag!r}") from None


def expression_tags():
    """Names of all registered expression rules, in registration order."""
    return tuple(_EXPRESSION_RULES)


# ------------------------------ built-in rules ------------------------------ #
# A leaf's own literal. Reads `x.val` directly so memoized readers never recurse into it.
register_expression_rule("literal", lambda e, read: e.x.val)
# d(x)/d(x)
register_expression_rule("const_one", lambda e, read: 1.0)
# One operand's full value (one per operand of an addition)
register_expression_rule("value_of", lambda e, read: read(e.x))
# Chain-rule weighting: inner contribution times the current value of x
register_expression_rule("scaled", lambda e, read: e.inner.evaluate(read) * read(e.x))
