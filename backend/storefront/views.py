"""Which top-level view is active: the public site or the admin console."""

import threading
from enum import Enum
from typing import Any, Optional

from .logging_config import get_logger

logger = get_logger("views")

HOME_PATH = "/"
ADMIN_PATH = "/admin"


class View(str, Enum):
    HOME = "home"
    ADMIN = "admin"


class AdminScreen(str, Enum):
    LOGIN = "login"
    CONSOLE = "console"


def view_for_path(path: str) -> View:
    return View.ADMIN if path.rstrip("/") == ADMIN_PATH else View.HOME


def admin_screen(session: Optional[Any]) -> AdminScreen:
    """The admin view shows the console only when a session is present."""
    return AdminScreen.CONSOLE if session else AdminScreen.LOGIN


class ViewRouter:
    """
    Two-state router (home/admin) that also follows Supabase auth events.

    A SIGNED_IN event switches to the admin view and rewrites the path to
    /admin. Logging out returns to the home view.
    """

    def __init__(self, path: str = HOME_PATH):
        self._lock = threading.Lock()
        self._path = path
        self._view = view_for_path(path)
        self._session: Optional[Any] = None

    @property
    def view(self) -> View:
        return self._view

    @property
    def path(self) -> str:
        return self._path

    @property
    def session(self) -> Optional[Any]:
        return self._session

    def navigate(self, path: str) -> View:
        with self._lock:
            self._path = path
            self._view = view_for_path(path)
            return self._view

    def navigate_home(self) -> View:
        return self.navigate(HOME_PATH)

    def navigate_admin(self) -> View:
        return self.navigate(ADMIN_PATH)

    def handle_auth_event(self, event: str, session: Optional[Any]) -> None:
        logger.info("Auth event %s", event)
        with self._lock:
            self._session = session
        if event == "SIGNED_IN":
            self.navigate_admin()

    def logout(self) -> View:
        with self._lock:
            self._session = None
        return self.navigate_home()
