"""
Hook pipeline for TreeEdit.

Every mutating operation is wrapped as

    before-hook (may veto)  ->  default mutation  ->  after-hook

Hooks may be plain functions or coroutine functions; awaitable results
are awaited. Only a literal False from the before-hook vetoes. The
mutation itself is synchronous, so once permitted it is applied without
any suspension point in between.
"""

import inspect
import logging
from typing import Any, Callable, Optional

from .hook_policies import AFTER, BEFORE, FailFastPolicy, HookErrorPolicy


logger = logging.getLogger(__name__)


async def resolve(result: Any) -> Any:
    """Await a hook result if it is awaitable, otherwise return it as-is."""
    if inspect.isawaitable(result):
        return await result
    return result


class HookPipeline:
    """
    Wraps one mutation with its before/after hooks.

    Each call is an independent invocation: the pipeline does not
    serialize concurrent calls, but within a call the order
    before -> mutate -> after is strict and the after-hook only runs
    once the mutation has been applied.

    Attributes:
        operation: Name used in logs and error records
        mutate: Synchronous callable(item, *args) -> bool applying the change
        before: Optional veto hook(item, *args)
        after: Optional notification hook(item, *args)
        policy: HookErrorPolicy deciding what a raising hook means
    """

    def __init__(
        self,
        operation: str,
        mutate: Callable[..., Optional[bool]],
        before: Optional[Callable] = None,
        after: Optional[Callable] = None,
        policy: Optional[HookErrorPolicy] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.operation = operation
        self.mutate = mutate
        self.before = before
        self.after = after
        self.policy = policy or FailFastPolicy()
        self.log = log or logger

    async def __call__(self, item: Any, *args: Any) -> bool:
        """
        Run the wrapped operation.

        Args:
            item: Tree item the operation applies to
            *args: Extra hook/mutation arguments (e.g. action, new parent)

        Returns:
            False if vetoed or if the mutation reported failure,
            True once the mutation has been applied
        """
        if self.before is not None:
            verdict = await self._call_hook(self.before, BEFORE, item, *args)
            if verdict is False:
                self.log.info(f"{self.operation} vetoed by before-hook")
                return False

        applied = self.mutate(item, *args)
        if applied is False:
            self.log.debug(f"{self.operation} mutation was a no-op")
            return False

        if self.after is not None:
            await self._call_hook(self.after, AFTER, item, *args)
        return True

    async def _call_hook(self, hook: Callable, stage: str, item: Any, *args: Any) -> Any:
        try:
            return await resolve(hook(item, *args))
        except Exception as e:
            return self.policy.handle(e, self.operation, stage, item)

    def __repr__(self) -> str:
        return (
            f"HookPipeline({self.operation!r}, before={self.before is not None}, "
            f"after={self.after is not None}, policy={self.policy.__class__.__name__})"
        )
