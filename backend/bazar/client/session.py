"""
Client session store

Single owner of the client-side state: the logged-in user, their token
and the cart. User and token are mirrored to a JSON file so a session
survives restarts; the cart lives in memory only.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from bazar.client.cart import Cart

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Usage:
        session = SessionStore(Path.home() / ".bazar" / "session.json").load()
        if session.is_authenticated:
            headers = session.auth_headers()
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.cart = Cart()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def load(self) -> "SessionStore":
        """Read user and token from disk; a missing or corrupt file means logged out"""
        if not self.path or not self.path.exists():
            return self

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return self

        if isinstance(data, dict):
            self.token = data.get("token")
            self.user = data.get("user")
        return self

    def save(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"token": self.token, "user": self.user}),
            encoding="utf-8",
        )

    def set_auth(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user
        self.save()

    def clear(self) -> None:
        """Log out: drop token, user and cart, and remove the file"""
        self.token = None
        self.user = None
        self.cart.clear()
        if self.path and self.path.exists():
            self.path.unlink()
