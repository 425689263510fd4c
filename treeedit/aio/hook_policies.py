"""
Hook error policies for TreeEdit.

Hooks are host code. When one raises, the pipeline delegates the decision
to a policy: propagate the exception, or treat the failure as a veto
(before-hooks) and carry on (after-hooks).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..exceptions import HookErrorThresholdExceeded


logger = logging.getLogger(__name__)

BEFORE = 'before'
AFTER = 'after'


class HookErrorPolicy(ABC):
    """
    Base class for hook error policies.

    Subclasses decide what a failing hook means for the operation
    that invoked it.
    """

    @abstractmethod
    def handle(self, error: Exception, operation: str, stage: str, item: Any) -> Optional[bool]:
        """
        Handle an exception raised by a hook.

        Args:
            error: The exception raised by the hook
            operation: Name of the wrapped operation ('create', 'delete', 'update')
            stage: BEFORE or AFTER
            item: The tree item passed to the hook

        Returns:
            For BEFORE: False to veto the mutation, anything else to permit it.
            For AFTER: ignored, the mutation is already applied.
            Re-raise to abort the operation with the exception.
        """
        pass

    def _record(self, errors: List[Dict[str, Any]], error: Exception, operation: str,
                stage: str, item: Any) -> None:
        errors.append({
            'operation': operation,
            'stage': stage,
            'item': item,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })


class FailFastPolicy(HookErrorPolicy):
    """
    Policy that immediately re-raises any hook error.

    This is the default: a failing before-hook stops the operation before
    anything is mutated; a failing after-hook surfaces to the caller with
    the mutation already applied.
    """

    def handle(self, error: Exception, operation: str, stage: str, item: Any) -> Optional[bool]:
        """Re-raise the error immediately."""
        raise error


class VetoOnErrorPolicy(HookErrorPolicy):
    """
    Policy that turns a failing before-hook into a veto.

    Errors are collected for later inspection and logged. A failing
    after-hook is recorded and otherwise ignored.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        self.errors: List[Dict[str, Any]] = []
        self.verbose = verbose

    def handle(self, error: Exception, operation: str, stage: str, item: Any) -> Optional[bool]:
        self._record(self.errors, error, operation, stage, item)
        if self.verbose:
            logger.warning(f"{stage}-hook of {operation} failed: {error!r}")
        if stage == BEFORE:
            return False
        return None

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'vetoes': sum(1 for e in self.errors if e['stage'] == BEFORE),
            'after_errors': sum(1 for e in self.errors if e['stage'] == AFTER),
            'errors': self.errors,
        }


class ThresholdPolicy(VetoOnErrorPolicy):
    """
    Policy that tolerates hook errors up to a threshold, then fails fast.

    Useful when an occasional hook failure is expected but a stream of
    them indicates a broken host.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for every tolerated error
        """
        super().__init__(verbose=verbose)
        self.max_errors = max_errors

    def handle(self, error: Exception, operation: str, stage: str, item: Any) -> Optional[bool]:
        if len(self.errors) >= self.max_errors:
            raise HookErrorThresholdExceeded(
                f"Hook error threshold exceeded ({self.max_errors} errors)"
            ) from error
        return super().handle(error, operation, stage, item)
