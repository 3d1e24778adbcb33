import numpy as np
import pytest

from lazy_aad import Variable, use_tape
from lazy_aad.core.expression import Expression


def test_leaf_identity():
    x = Variable(3.5)
    assert x.get_value() == 3.5
    assert x.get_gradient(x) == 1.0


def test_default_literal_is_zero():
    x = Variable()
    assert x.get_value() == 0.0
    assert x.get_gradient(x) == 1.0


def test_zero_default_between_unrelated_leaves():
    x = Variable(1.0)
    y = Variable(1.0)
    assert x.get_gradient(y) == 0.0
    assert y.get_gradient(x) == 0.0


def test_identity_not_value_equality():
    # Equal literals must still be distinct dependencies
    x = Variable(2.0)
    y = Variable(2.0)
    assert x.handle != y.handle
    assert not x.depends_on(y)


def test_seeded_expressions():
    x = Variable(4.0)
    assert [e.op_tag for e in x.value_expressions] == ["literal"]
    assert x.dependencies() == (x.handle,)
    assert [e.op_tag for e in x.gradient_expressions[x.handle]] == ["const_one"]


def test_literal_stored_as_float64():
    x = Variable(3)
    assert isinstance(x.val, np.float64)
    assert x.get_value() == 3.0


@pytest.mark.parametrize("bad", ["1.0", None, [1.0], True])
def test_rejects_non_numeric_literal(bad):
    with pytest.raises(TypeError):
        Variable(bad)


def test_set_value_rejects_non_numeric():
    x = Variable(1.0)
    with pytest.raises(TypeError):
        x.set_value("2")
    assert x.get_value() == 1.0


def test_set_value_updates_leaf():
    x = Variable(1.0)
    x.set_value(-2.5)
    assert x.get_value() == -2.5
    assert x.get_gradient(x) == 1.0


def test_add_value_expression_accumulates():
    x = Variable(1.0)
    y = Variable(5.0)
    x.add_value_expression(Expression("value_of", y))
    assert x.get_value() == 6.0


def test_add_gradient_expression_never_overwrites():
    x = Variable(1.0)
    y = Variable(1.0)
    x.add_gradient_expression(y, Expression("const_one", y))
    x.add_gradient_expression(y.handle, [Expression("const_one", y), Expression("const_one", y)])
    assert len(x.gradient_expressions[y.handle]) == 3
    assert x.get_gradient(y) == 3.0
    # existing self entry untouched
    assert x.get_gradient(x) == 1.0


def test_gradient_key_must_be_variable_or_handle():
    x = Variable(1.0)
    with pytest.raises(TypeError):
        x.get_gradient(1.0)


def test_handles_unique_across_tapes():
    x = Variable(1.0)
    with use_tape():
        y = Variable(1.0)
    assert x.handle != y.handle
    assert x.get_gradient(y) == 0.0


def test_repeated_reads_are_identical():
    x = Variable(0.1)
    y = Variable(0.2)
    z = x + y
    assert z.get_value() == z.get_value()
    assert z.get_gradient(x) == z.get_gradient(x)


def test_tape_owns_rejects_foreign_and_negative_handles(fresh_tape):
    x = Variable(1.0)
    assert fresh_tape.owns(x.handle)
    bad = x.handle._replace(index=-1)
    assert not fresh_tape.owns(bad)
    with pytest.raises(KeyError):
        fresh_tape.lookup(bad)
    with use_tape() as other:
        assert not other.owns(x.handle)
