from .network import NetworkClient, NetworkError
from .session import ClientSession, Outcome, SessionError, SessionState

__all__ = ["NetworkClient", "NetworkError", "ClientSession", "Outcome", "SessionError", "SessionState"]
