# lazy_aad/errors.py
"""
Exception hierarchy for the lazy AAD engine.

Evaluation itself never fails: an unrelated variable simply has a zero
partial derivative. Errors only come from misuse of the registries and from
malformed exported graphs.
"""


class AADError(Exception):
    """Base class for every error raised by lazy_aad."""


class UnknownOperatorError(AADError, KeyError):
    """An expression tag or operator tag that was never registered."""

    def __str__(self):
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ""


class RegistrationError(AADError, ValueError):
    """A tag was registered twice without ``replace=True``."""


class GraphFormatError(AADError, ValueError):
    """Exported graph data that cannot be turned back into a tape."""
