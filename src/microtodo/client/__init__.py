"""
microtodo.client

Client-side token lifecycle.

Responsibilities:
- Persist the session token (`store`).
- Track Unauthenticated/Authenticated state (`session`).
- Attach bearer tokens and react to 401s as httpx auth middleware (`transport`).
- Typed API calls against both services (`api`).
"""

from microtodo.client.api import MicroTodoClient
from microtodo.client.session import AuthState, SessionManager
from microtodo.client.store import FileTokenStore, MemoryTokenStore, StoredSession, TokenStore
from microtodo.client.transport import BearerAuth

__all__ = [
    "AuthState",
    "BearerAuth",
    "FileTokenStore",
    "MemoryTokenStore",
    "MicroTodoClient",
    "SessionManager",
    "StoredSession",
    "TokenStore",
]
