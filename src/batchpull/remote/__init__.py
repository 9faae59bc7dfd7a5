"""Remote store access: sessions, profile negotiation and per-day fetching."""

from batchpull.remote.base import ConnectionDescriptor, ConnectionProfile, RemoteConnectionError
from batchpull.remote.fetcher import RemoteFileFetcher
from batchpull.remote.negotiator import ConnectionNegotiator, negotiated_session

__all__ = [
    "ConnectionDescriptor",
    "ConnectionNegotiator",
    "ConnectionProfile",
    "RemoteConnectionError",
    "RemoteFileFetcher",
    "negotiated_session",
]
