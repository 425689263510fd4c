"""Exceptions raised by TreeEdit.

Ordinary domain outcomes (unknown ids, vetoed operations, unusable drop
geometry) are reported through return values and never raise. The
classes here cover programmer errors only.
"""


class TreeEditError(Exception):
    """Base class for all TreeEdit errors."""


class ConfigurationError(TreeEditError, ValueError):
    """Raised when TreeOptions are malformed.

    Only raised at construction time, never from a mutation.
    """


class HookErrorThresholdExceeded(TreeEditError, RuntimeError):
    """Raised by ThresholdPolicy once too many hooks have failed."""
