# lazy_aad/ops/arithmetic.py
from ..core.expression import Expression
from .registry import apply_operator, register_operator


@register_operator("add")
def _build_add(out, x, y):
    """
    z = x + y
      value     : value_of(x) + value_of(y), re-read on every evaluation
      gradients : for every key k of x and of y, copy the expressions unweighted
                  (d(x+y)/dx = d(x+y)/dy = 1); shared keys concatenate, so
                  x + x gives two unit contributions under x.
    """
    out.add_value_expression(Expression("value_of", x))
    out.add_value_expression(Expression("value_of", y))
    for key, exps in list(x.gradient_expressions.items()):
        out.add_gradient_expression(key, exps)
    for key, exps in list(y.gradient_expressions.items()):
        out.add_gradient_expression(key, exps)


def add(x, y, *, name=None):
    return apply_operator("add", x, y, name=name)
