from .common import format_peer, utc_timestamp

__all__ = ["format_peer", "utc_timestamp"]
