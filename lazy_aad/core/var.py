# lazy_aad/core/var.py
from __future__ import annotations
import numpy as np
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config import get_engine_config
from . import tape as tape_mod  # Use module access for use_tape() compatibility
from .expression import Expression, expression_rule
from .tape import Handle, Tape

_NUMERIC = (int, float, np.integer, np.floating)


def _check_literal(val: Any):
    # bool is an int subclass; reject it explicitly
    if isinstance(val, (bool, np.bool_)) or not isinstance(val, _NUMERIC):
        raise TypeError(f"Variable only accepts real numeric scalars, but got {type(val)}")


def _key(on: Any) -> Handle:
    if isinstance(on, Variable):
        return on.handle
    if isinstance(on, Handle):
        return on
    raise TypeError(f"expected a Variable or Handle, got {type(on)}")


class Variable:
    """
    A node in the computation graph, evaluated lazily.

    Attributes
    ----------
    val : np.float64
        The most recently set literal. Only meaningful for leaves; derived
        variables carry a 0.0 literal.
    value_expressions : list[Expression]
        Contributions to the value; `get_value()` is their sum.
    gradient_expressions : dict[Handle, list[Expression]]
        For every upstream variable (keyed by handle, never by value), the
        contributions to the partial derivative w.r.t. that variable.
    handle : Handle
        Stable identity on the tape this variable was created on.
    name : Optional[str]
        Optional debug/pretty-print name.

    Notes
    -----
    Nothing is cached. Expressions read their operands' live state at
    evaluation time, so `set_value` on a leaf changes the results of every
    variable built from it, including ones built before the call.
    """

    def __init__(self, val: Any = 0.0, *, name: Optional[str] = None, tape: Optional[Tape] = None):
        _check_literal(val)
        self.val = get_engine_config()['dtype'](val)
        self.name = name
        self.value_expressions: List[Expression] = []
        self.gradient_expressions: Dict[Handle, List[Expression]] = {}

        self.tape = tape if tape is not None else tape_mod.global_tape
        self.handle = self.tape.register(self)

        # Seeds: value = own literal, d(self)/d(self) = 1
        self.value_expressions.append(Expression("literal", self))
        self.gradient_expressions[self.handle] = [Expression("const_one", self)]

    def __repr__(self):
        return f"Variable({self.val!r}, handle={self.handle.index}, name={self.name!r})"

    # ------------------------------ accumulation ------------------------------ #
    def add_value_expression(self, exp: Expression):
        self.value_expressions.append(exp)
        self.tape.bump_version()

    def add_gradient_expression(self, key: Union["Variable", Handle],
                                exps: Union[Expression, Sequence[Expression]]):
        """
        Append gradient contributions under `key`. Existing entries are never
        overwritten; a new key starts a new list.
        """
        if isinstance(exps, Expression):
            exps = [exps]
        self.gradient_expressions.setdefault(_key(key), []).extend(exps)
        self.tape.bump_version()

    # ------------------------------- evaluation ------------------------------- #
    def set_value(self, val: Any):
        """Overwrite the literal. Downstream variables see it on their next evaluation."""
        _check_literal(val)
        self.val = get_engine_config()['dtype'](val)
        self.tape.bump_version()

    def get_value(self) -> float:
        res = 0.0
        for exp in self.value_expressions:
            res += float(expression_rule(exp.op_tag)(exp, Variable.get_value))
        return float(res)

    def get_gradient(self, on: Union["Variable", Handle]) -> float:
        """Partial derivative of self w.r.t. `on`; 0.0 when self does not depend on it."""
        res = 0.0
        for exp in self.gradient_expressions.get(_key(on), ()):
            res += float(expression_rule(exp.op_tag)(exp, Variable.get_value))
        return float(res)

    def depends_on(self, other: Union["Variable", Handle]) -> bool:
        return _key(other) in self.gradient_expressions

    def dependencies(self):
        return tuple(self.gradient_expressions)

    # Operator overloading
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)
