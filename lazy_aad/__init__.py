# lazy_aad/__init__.py
# Lazy automatic differentiation over scalar variable graphs

from .core.var import Variable
from .core.expression import Expression, register_expression_rule
from .core.tape import Handle, Tape, global_tape, use_tape
from .core.engine import CachedEvaluator, evaluate_value, evaluate_gradient
from .core.seeds import grad, grads, grads_list, value
from .core.graph_utils import export_graph, load_graph, get_graph_stats
from .ops import add, apply_operator, register_operator
from .config import get_engine_config, set_engine_config
from .errors import AADError, GraphFormatError, RegistrationError, UnknownOperatorError

__version__ = "0.1.0"

__all__ = [
    # Core
    'Variable',
    'Expression',
    'register_expression_rule',
    'Handle',
    'Tape',
    'global_tape',
    'use_tape',
    # Engine
    'CachedEvaluator',
    'evaluate_value',
    'evaluate_gradient',
    'grad',
    'grads',
    'grads_list',
    'value',
    # Graph
    'export_graph',
    'load_graph',
    'get_graph_stats',
    # Operators
    'add',
    'apply_operator',
    'register_operator',
    # Config / errors
    'get_engine_config',
    'set_engine_config',
    'AADError',
    'GraphFormatError',
    'RegistrationError',
    'UnknownOperatorError',
]
