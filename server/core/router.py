from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Dict, Optional, Union

from shared.protocol.commands import MsgType, normalize_command
from shared.protocol.messages import Frame

logger = logging.getLogger(__name__)

# Handlers run inline (also from the UDP callback) so they are plain functions.
Handler = Callable[[Frame, str], Optional[Frame]]


class FrameRouter:
    """Maps frame types to handlers returning an optional reply frame."""

    def __init__(self) -> None:
        self._handlers: Dict[int, Handler] = {}

    def register(self, command: Union[int, MsgType], handler: Handler) -> None:
        self._handlers[normalize_command(command)] = handler

    def dispatch(self, frame: Frame, peer: str) -> Optional[Frame]:
        handler = self._handlers.get(frame.type)
        if handler:
            return handler(frame, peer)
        logger.debug("No handler registered for type %s from %s", frame.type, peer)
        return None
