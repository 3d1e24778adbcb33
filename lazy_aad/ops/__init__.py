# lazy_aad/ops/__init__.py

# Ensure operator builders are registered
from . import arithmetic

# Convenience re-exports so users can do: from lazy_aad.ops import add, ...
from .arithmetic import add
from .registry import apply_operator, get_operator, register_operator, registered_operators

__all__ = [
    "add",
    "apply_operator", "get_operator", "register_operator", "registered_operators",
]
