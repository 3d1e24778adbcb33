from lazy_aad import Variable, grad, grads, grads_list, value
from lazy_aad.core import tape as tape_mod


def test_value_passthrough():
    assert value(3.0) == 3.0
    assert value(Variable(2.0) + Variable(1.0)) == 3.0


def test_grad_single_input():
    assert grad(lambda x: x + x + x, 1.0) == 3.0


def test_grad_constant_output():
    assert grad(lambda x: 5.0, 1.0) == 0.0


def test_grad_isolated_tape(fresh_tape):
    grad(lambda x: x + x, 1.0)
    assert len(fresh_tape) == 0
    assert tape_mod.global_tape is fresh_tape


def test_grads_dict():
    f = lambda v: (v["a"] + v["b"]) + v["a"]
    g = grads(f, {"a": 1.0, "b": 2.0, "c": 3.0})
    assert list(g) == ["a", "b", "c"]
    assert g == {"a": 2.0, "b": 1.0, "c": 0.0}


def test_grads_list():
    f = lambda xs: xs[0] + xs[0] + xs[1]
    assert grads_list(f, [2.0, 4.0]) == [2.0, 1.0]
