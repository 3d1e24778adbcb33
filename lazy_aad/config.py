# lazy_aad/config.py
import numpy as np

# Global configuration for evaluation
_ENGINE_CONFIG = {
    'memoize': False,     # evaluate_value/evaluate_gradient default: reference (False) or cached (True)
    'dtype': np.float64,  # storage type for leaf literals
}


def set_engine_config(memoize: bool = None, dtype=None):
    """
    Configure engine settings globally.

    Args:
        memoize: Default evaluation mode used by `evaluate_value` and
                 `evaluate_gradient` when they are not told explicitly.
        dtype: NumPy floating type used to store leaf literals.
    """
    if memoize is not None:
        _ENGINE_CONFIG['memoize'] = bool(memoize)
    if dtype is not None:
        if not issubclass(np.dtype(dtype).type, np.floating):
            raise TypeError(f"dtype must be a floating type, got {dtype!r}")
        _ENGINE_CONFIG['dtype'] = np.dtype(dtype).type


def get_engine_config() -> dict:
    """Get the current engine configuration."""
    return _ENGINE_CONFIG.copy()
