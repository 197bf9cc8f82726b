"""Python client for the Mandi marketplace auth API."""

from mandi_client.client import MandiClient
from mandi_client.session import AuthSession
from mandi_client.storage import TokenStore

__all__ = ["AuthSession", "MandiClient", "TokenStore"]
