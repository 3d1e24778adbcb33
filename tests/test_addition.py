import pytest

from lazy_aad import Variable, add


def test_addition_value():
    x = Variable(3.0)
    y = Variable(4.0)
    z = x + y
    assert z.get_value() == 7.0


def test_addition_gradients():
    x = Variable(3.0)
    y = Variable(4.0)
    z = x + y
    assert z.get_gradient(x) == 1.0
    assert z.get_gradient(y) == 1.0
    assert z.get_gradient(z) == 1.0


def test_addition_does_not_touch_operands():
    x = Variable(3.0)
    y = Variable(4.0)
    x + y
    assert x.get_gradient(y) == 0.0
    assert len(x.value_expressions) == 1
    assert x.dependencies() == (x.handle,)


def test_self_addition_accumulates():
    x = Variable(2.0)
    w = x + x
    assert w.get_value() == 4.0
    assert w.get_gradient(x) == 2.0
    assert len(w.gradient_expressions[x.handle]) == 2


def test_three_term_chain():
    x = Variable(1.0)
    y = Variable(2.0)
    u = x + y
    v = u + x
    assert v.get_value() == 4.0
    assert v.get_gradient(x) == 2.0
    assert v.get_gradient(y) == 1.0
    assert v.get_gradient(u) == 1.0


def test_key_set_is_union_of_operands():
    x = Variable(1.0)
    y = Variable(2.0)
    w = Variable(3.0)
    u = x + y
    v = u + w
    assert set(v.dependencies()) == {v.handle, u.handle, x.handle, y.handle, w.handle}


def test_diamond_shares_ancestry():
    x = Variable(1.5)
    a = x + x
    b = x + a
    c = a + b
    # c = a + (x + a) = 2a + x = 5x
    assert c.get_value() == pytest.approx(7.5)
    assert c.get_gradient(x) == 5.0
    assert c.get_gradient(a) == 2.0


def test_live_mutation_visible_downstream():
    x = Variable(1.0)
    y = Variable(2.0)
    z = x + y
    assert z.get_value() == 3.0
    x.set_value(10.0)
    assert z.get_value() == 12.0
    assert z.get_gradient(x) == 1.0


def test_mutation_propagates_through_chain():
    x = Variable(1.0)
    y = Variable(2.0)
    v = (x + y) + x
    y.set_value(-2.0)
    assert v.get_value() == 0.0


def test_add_with_plain_numbers():
    x = Variable(1.0)
    assert (x + 2.0).get_value() == 3.0
    assert (2.0 + x).get_value() == 3.0
    assert (x + 2).get_gradient(x) == 1.0


def test_builtin_sum():
    xs = [Variable(float(i)) for i in range(5)]
    total = sum(xs)
    assert total.get_value() == 10.0
    assert all(total.get_gradient(x) == 1.0 for x in xs)


def test_functional_add_with_name():
    x = Variable(1.0)
    z = add(x, x, name="twice")
    assert z.name == "twice"
    assert z.get_gradient(x) == 2.0


def test_derived_literal_offsets_value():
    # A derived variable keeps its own literal seed; setting it shifts the value
    x = Variable(1.0)
    z = x + x
    z.set_value(0.5)
    assert z.get_value() == 2.5
    assert z.get_gradient(x) == 2.0
