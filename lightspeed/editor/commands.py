import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Set

logger = logging.getLogger(__name__)


class CommandRegistry:
    """
    In-process command bus.

    Handlers may be plain callables or coroutine functions; coroutines are
    scheduled on the running loop and tracked until they finish.
    """

    def __init__(self):
        self._handlers: Dict[str, Callable[..., Any]] = {}
        self._tasks: Set[asyncio.Task] = set()

    def register_command(self, command: str, handler: Callable[..., Any]):
        if command in self._handlers:
            logger.warning(f"Command '{command}' is already registered, replacing it")
        self._handlers[command] = handler

    def has_command(self, command: str) -> bool:
        return command in self._handlers

    def execute_command(self, command: str, *args: Any) -> Any:
        handler = self._handlers.get(command)
        if handler is None:
            logger.debug(f"No handler registered for command '{command}'")
            return None

        result = handler(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)
            return task
        return result

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Command handler failed: {task.exception()}")

    async def drain(self):
        """Wait for every scheduled command handler to finish."""
        pending = [task for task in self._tasks if not task.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [task for task in self._tasks if not task.done()]
