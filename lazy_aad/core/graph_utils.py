"""
Graph utilities: statistics, printing, and export/import of a tape.

Expressions are tagged records rather than closures, so a whole tape can be
written out as plain JSON-compatible data and rebuilt later.
"""

import numpy as np
from typing import Any, Dict, List, Optional
from collections import Counter

from ..errors import GraphFormatError
from .expression import Expression, expression_rule
from .tape import Tape
from .var import Variable, _check_literal

GRAPH_FORMAT = "lazy_aad.graph"
GRAPH_FORMAT_VERSION = 1


def _is_leaf(var: Variable) -> bool:
    return all(exp.op_tag == "literal" for exp in var.value_expressions)


def get_graph_stats(tape: Tape) -> Dict:
    """
    Collect graph statistics without printing.

    "fan_in" of a variable is the number of upstream variables it depends on
    (its own handle included).
    """
    if not tape.variables:
        return {
            'variables': 0,
            'leaves': 0,
            'value_expressions': 0,
            'gradient_expressions': 0,
            'edges': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'operations': {}
        }

    fan_ins = [len(v.gradient_expressions) for v in tape.variables]
    op_counter = Counter()
    n_value, n_grad = 0, 0
    for v in tape.variables:
        n_value += len(v.value_expressions)
        op_counter.update(exp.op_tag for exp in v.value_expressions)
        for exps in v.gradient_expressions.values():
            n_grad += len(exps)
            op_counter.update(exp.op_tag for exp in exps)

    return {
        'variables': len(tape.variables),
        'leaves': sum(1 for v in tape.variables if _is_leaf(v)),
        'value_expressions': n_value,
        'gradient_expressions': n_grad,
        'edges': sum(fan_ins),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'operations': dict(op_counter)
    }


def print_graph_summary(tape: Tape) -> Dict:
    """Print graph statistics and return them."""
    stats = get_graph_stats(tape)
    if stats['variables'] == 0:
        print("Empty computation graph")
        return stats

    n_exps = stats['value_expressions'] + stats['gradient_expressions']
    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
    print(f"Total variables:       {stats['variables']:,}")
    print(f"Leaves:                {stats['leaves']:,}")
    print(f"Value expressions:     {stats['value_expressions']:,}")
    print(f"Gradient expressions:  {stats['gradient_expressions']:,}")
    print(f"Dependency edges:      {stats['edges']:,}")
    print(f"Max fan-in:            {stats['max_fan_in']}")
    print(f"Avg fan-in:            {stats['avg_fan_in']:.2f}")
    print()
    print("Expression breakdown:")
    for op_tag, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / n_exps
        print(f"  {op_tag:12s}: {count:6,} ({pct:5.1f}%)")
    print("="*70 + "\n")
    return stats


def print_computation_graph(tape: Tape, max_nodes: int = 20) -> None:
    """Print one line per variable: value and the upstream variables it depends on."""
    print("\n" + "="*70)
    print("COMPUTATION GRAPH STRUCTURE")
    print("="*70)

    if not tape.variables:
        print("Empty graph")
        return

    for i, var in enumerate(tape.variables[:max_nodes]):
        label = var.name or ""
        deps = [f"Var{h.index}" if tape.owns(h) else "external"
                for h in var.gradient_expressions if h != var.handle]
        if deps:
            print(f"Var {i:4d}: {label:12s} ({var.get_value():10.6f}) <- [{', '.join(deps)}]")
        else:
            print(f"Var {i:4d}: {label:12s} ({var.get_value():10.6f}) [leaf]")

    if len(tape.variables) > max_nodes:
        print(f"... ({len(tape.variables) - max_nodes} more variables)")

    print("="*70 + "\n")


# ------------------------------ export / import ------------------------------ #
def _export_operand(tape: Tape, operand: Optional[Variable]) -> Optional[int]:
    if operand is None:
        return None
    if not tape.owns(operand.handle):
        raise GraphFormatError(f"{operand!r} is not on the exported tape")
    return operand.handle.index


def _export_expression(tape: Tape, exp: Expression) -> Dict[str, Any]:
    return {
        'op': exp.op_tag,
        'x': _export_operand(tape, exp.x),
        'y': _export_operand(tape, exp.y),
        'inner': None if exp.inner is None else _export_expression(tape, exp.inner),
    }


def export_graph(tape: Tape) -> Dict[str, Any]:
    """
    Serialize a tape to JSON-compatible data. Variables are referenced by
    their index on the tape.

    Raises GraphFormatError if any expression reaches a variable on another tape.
    """
    variables = []
    for var in tape.variables:
        gradient_expressions = []
        for handle, exps in var.gradient_expressions.items():
            if not tape.owns(handle):
                raise GraphFormatError(f"{var!r} depends on a variable outside the exported tape")
            gradient_expressions.append([handle.index, [_export_expression(tape, e) for e in exps]])
        variables.append({
            'name': var.name,
            'val': float(var.val),
            'value_expressions': [_export_expression(tape, e) for e in var.value_expressions],
            'gradient_expressions': gradient_expressions,
        })
    return {'format': GRAPH_FORMAT, 'version': GRAPH_FORMAT_VERSION, 'variables': variables}


def _check_operand(index: Any, available: int):
    if index is None:
        return
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < available:
        raise GraphFormatError(f"operand index {index!r} does not refer to an earlier variable")


def _check_expression(data: Any, available: int):
    if not isinstance(data, dict) or 'op' not in data:
        raise GraphFormatError(f"malformed expression entry: {data!r}")
    expression_rule(data['op'])  # unknown tags fail here, not at evaluation time
    _check_operand(data.get('x'), available)
    _check_operand(data.get('y'), available)
    if data.get('inner') is not None:
        _check_expression(data['inner'], available)


def _check_variable(entry: Any, available: int):
    if not isinstance(entry, dict):
        raise GraphFormatError(f"malformed variable entry: {entry!r}")
    try:
        _check_literal(entry['val'])
    except (KeyError, TypeError) as exc:
        raise GraphFormatError(f"malformed variable entry: {entry!r}") from exc
    raw_value_exps = entry.get('value_expressions')
    raw_grad_exps = entry.get('gradient_expressions')
    if not isinstance(raw_value_exps, list) or not isinstance(raw_grad_exps, list):
        raise GraphFormatError(f"expression fields of {entry!r} must be lists")
    for raw in raw_value_exps:
        _check_expression(raw, available)
    for pair in raw_grad_exps:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2 or not isinstance(pair[1], list):
            raise GraphFormatError(f"malformed gradient entry: {pair!r}")
        if pair[0] is None:
            raise GraphFormatError(f"gradient entry {pair!r} has no dependency index")
        _check_operand(pair[0], available)
        for raw in pair[1]:
            _check_expression(raw, available)


def _operand(built: List[Variable], index: Optional[int]) -> Optional[Variable]:
    return None if index is None else built[index]


def _build_expression(built: List[Variable], data: Dict[str, Any]) -> Expression:
    inner = data.get('inner')
    return Expression(
        data['op'],
        _operand(built, data.get('x')),
        _operand(built, data.get('y')),
        None if inner is None else _build_expression(built, inner),
    )


def load_graph(data: Dict[str, Any], tape: Optional[Tape] = None) -> Tape:
    """
    Rebuild a tape from `export_graph` output. Returns the (new or given) tape;
    the rebuilt variables are `tape.variables[-n:]` in export order.

    The whole document is validated before the first variable is created, so a
    GraphFormatError never leaves partial variables on `tape`.
    """
    if not isinstance(data, dict) or data.get('format') != GRAPH_FORMAT:
        raise GraphFormatError("not a lazy_aad graph export")
    if data.get('version') != GRAPH_FORMAT_VERSION:
        raise GraphFormatError(f"unsupported graph format version {data.get('version')!r}")
    entries = data.get('variables', [])
    if not isinstance(entries, list):
        raise GraphFormatError("'variables' must be a list")
    for i, entry in enumerate(entries):
        # operands may refer to earlier variables or to the entry itself
        _check_variable(entry, i + 1)

    tape = tape if tape is not None else Tape()
    built: List[Variable] = []
    for entry in entries:
        var = Variable(entry['val'], name=entry.get('name'), tape=tape)
        built.append(var)
        # Replace the constructor seeds; the export already lists them
        var.value_expressions = [_build_expression(built, raw) for raw in entry['value_expressions']]
        var.gradient_expressions = {}
        for index, raw_exps in entry['gradient_expressions']:
            var.add_gradient_expression(built[index], [_build_expression(built, raw) for raw in raw_exps])
    return tape
