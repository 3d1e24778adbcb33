# lazy_aad/core/engine.py
from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple, Union

from ..config import get_engine_config
from .expression import expression_rule
from .tape import Handle, Tape
from .var import Variable, _key

logger = logging.getLogger(__name__)


def _value_operands(var: Variable):
    """Operands reachable from the value-expressions of `var`, nested `inner` ones included."""
    pending = list(var.value_expressions)
    while pending:
        exp = pending.pop()
        yield from exp.operands()
        if exp.inner is not None:
            pending.append(exp.inner)


class CachedEvaluator:
    """
    Memoized evaluation of values and gradients.

    `Variable.get_value()` recomputes the whole expression chain on every call,
    which grows combinatorially when subgraphs are shared. This evaluator
    caches each variable's value by handle. The cache is dropped as soon as
    any tape it has read from changes version (a `set_value`, an appended
    expression or a `reset`), so results always match the reference evaluation.

    Example
    -------
    ev = CachedEvaluator()
    ev.value(z), ev.gradient(z, x)
    x.set_value(2.0)
    ev.value(z)    # recomputed
    """

    def __init__(self):
        self._values: Dict[Handle, float] = {}
        # id(tape) -> (tape, version seen when the cache was filled)
        self._seen: Dict[int, Tuple[Tape, int]] = {}

    def clear(self):
        self._values.clear()
        self._seen.clear()

    def _is_stale(self) -> bool:
        return any(tape.version != version for tape, version in self._seen.values())

    def _sync(self):
        if self._is_stale():
            logger.debug("dropping %d cached values after a tape change", len(self._values))
            self.clear()

    def _track(self, var: Variable):
        if id(var.tape) not in self._seen:
            self._seen[id(var.tape)] = (var.tape, var.tape.version)

    def _compute(self, var: Variable) -> float:
        # All operands are already cached, so rules only ever hit the cache
        res = 0.0
        for exp in var.value_expressions:
            res += float(expression_rule(exp.op_tag)(exp, self._cached))
        return float(res)

    def _cached(self, var: Variable) -> float:
        return self._values[var.handle]

    def _read(self, var: Variable) -> float:
        """
        Cached value of `var`. Walks the operands with an explicit post-order
        stack, so chain depth is not bounded by the Python recursion limit.
        """
        if var.handle in self._values:
            return self._values[var.handle]
        stack = [(var, False)]
        while stack:
            node, expanded = stack.pop()
            if node.handle in self._values:
                continue
            if expanded:
                self._track(node)
                self._values[node.handle] = self._compute(node)
                continue
            stack.append((node, True))
            for operand in _value_operands(node):
                if operand is not node and operand.handle not in self._values:
                    stack.append((operand, False))
        return self._values[var.handle]

    def value(self, var: Variable) -> float:
        self._sync()
        return self._read(var)

    def gradient(self, var: Variable, on: Union[Variable, Handle]) -> float:
        self._sync()
        res = 0.0
        for exp in var.gradient_expressions.get(_key(on), ()):
            res += exp.evaluate(self._read)
        return float(res)

    def __len__(self):
        return len(self._values)


def _use_memo(memoize: Optional[bool]) -> bool:
    return get_engine_config()['memoize'] if memoize is None else memoize


def evaluate_value(var: Variable, memoize: Optional[bool] = None,
                   evaluator: Optional[CachedEvaluator] = None) -> float:
    """
    Value of `var`, either by the reference walk (`var.get_value()`) or through
    a CachedEvaluator. `memoize=None` uses the engine configuration; passing an
    `evaluator` implies memoization and lets callers reuse its cache.
    """
    if evaluator is None and not _use_memo(memoize):
        return var.get_value()
    return (evaluator if evaluator is not None else CachedEvaluator()).value(var)


def evaluate_gradient(var: Variable, on: Union[Variable, Handle], memoize: Optional[bool] = None,
                      evaluator: Optional[CachedEvaluator] = None) -> float:
    """Partial derivative of `var` w.r.t. `on`; see `evaluate_value` for the modes."""
    if evaluator is None and not _use_memo(memoize):
        return var.get_gradient(on)
    return (evaluator if evaluator is not None else CachedEvaluator()).gradient(var, on)
