from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from .connection import ConnectionContext

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Supervises connection handler tasks and enforces the connection limit."""

    def __init__(self, max_connections: int = 0) -> None:
        self.max_connections = max_connections
        self._by_task: Dict[asyncio.Task, ConnectionContext] = {}

    @property
    def active_count(self) -> int:
        return len(self._by_task)

    def can_accept(self) -> bool:
        return not self.max_connections or len(self._by_task) < self.max_connections

    def register(self, task: asyncio.Task, ctx: ConnectionContext) -> None:
        self._by_task[task] = ctx

    def unregister(self, task: asyncio.Task) -> Optional[ConnectionContext]:
        return self._by_task.pop(task, None)

    def contexts(self) -> List[ConnectionContext]:
        return list(self._by_task.values())

    async def close_all(self) -> None:
        """Cancel every active handler and wait for them to release their sockets."""
        tasks = [task for task in self._by_task if task is not asyncio.current_task()]
        if not tasks:
            return
        logger.info("Closing %s active connections", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        for task in tasks:
            self._by_task.pop(task, None)
