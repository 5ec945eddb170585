from .connection import ConnectionContext
from .connection_manager import ConnectionManager
from .dispatcher import Dispatcher
from .handlers import ConnectionHandler, DatagramHandler
from .router import FrameRouter

__all__ = [
    "ConnectionContext",
    "ConnectionManager",
    "ConnectionHandler",
    "DatagramHandler",
    "Dispatcher",
    "FrameRouter",
]
