# lazy_aad/core/seeds.py

#-----------------------------------------------------------------------------
# Drivers: build f in an isolated tape, then read partials of its output
# w.r.t. the inputs straight from the output's gradient map.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Union

from .var import Variable
from .tape import use_tape
from .engine import CachedEvaluator, evaluate_gradient

Number = Union[int, float]


def value(x: Any) -> Any:
    """Return the numeric value of a Variable; pass through plain numbers unchanged."""
    return x.get_value() if isinstance(x, Variable) else x


def _ensure_var(v: Any, *, name: str) -> Variable:
    """Wrap a plain value as a leaf Variable if needed; otherwise return the Variable itself."""
    return v if isinstance(v, Variable) else Variable(v, name=name)


def _ensure_output(y: Any) -> Variable:
    # A constant output depends on nothing, so every partial is 0
    return y if isinstance(y, Variable) else Variable(y, name="y")


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Variable], Variable], x0: Union[Number, Variable]) -> float:
    """
    Derivative of y=f(x) at x0 (single input), built within a fresh, isolated tape.
    """
    with use_tape():
        x = _ensure_var(x0, name="x")
        y = _ensure_output(f(x))
        return evaluate_gradient(y, x)


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Variable]], Variable],
          inputs: Dict[str, Union[Number, Variable]]) -> Dict[str, float]:
    """
    Partials of y=f(vars) w.r.t. ALL inputs (dict form).

    Parameters
    ----------
    f       : function taking a dict {name: Variable} and returning a Variable
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: float}  # partials in the same key order as `inputs`
    """
    with use_tape():
        vars_ad: Dict[str, Variable] = {k: _ensure_var(v, name=k) for k, v in inputs.items()}
        y = _ensure_output(f(vars_ad))
        ev = CachedEvaluator()
        return {k: ev.gradient(y, vars_ad[k]) for k in inputs.keys()}


def grads_list(f: Callable[[List[Variable]], Variable],
               x0_list: Iterable[Union[Number, Variable]]) -> List[float]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0] + xs[0] + xs[1]
    grads_list(f, [2.0, 4.0]) -> [2.0, 1.0]
    """
    with use_tape():
        xs: List[Variable] = [_ensure_var(v, name=f"x{i}") for i, v in enumerate(x0_list)]
        y = _ensure_output(f(xs))
        ev = CachedEvaluator()
        return [ev.gradient(y, x) for x in xs]
