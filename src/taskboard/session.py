"""Binds a BoardStore to the user reported by an authentication provider."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from taskboard.board_store.results import MutationResult, RejectionReason
from taskboard.persistence.exceptions import PersistenceError

if TYPE_CHECKING:
    from taskboard.board_store import BoardStore

logger = logging.getLogger("taskboard.session")

UserListener = Callable[[str | None], None]


class AuthProvider(Protocol):
    """Interface for the authentication collaborator."""

    def current_user_id(self) -> str | None:
        """Id of the logged-in user, or None."""
        ...

    def add_listener(self, listener: UserListener) -> None:
        """Register a callback run with the new user id on login/signup/logout."""
        ...


class SessionBinder:
    """Keeps a BoardStore bound to whoever the AuthProvider says is logged in.

    A concrete user id binds the store (loading or bootstrapping that user's
    boards); None unbinds it. A repeated notification for the user already
    bound is ignored. Storage failures while binding are logged and kept in
    ``last_result``; they never propagate into the auth provider.
    """

    def __init__(self, auth: AuthProvider, store: BoardStore) -> None:
        self._auth = auth
        self._store = store
        self.last_result: MutationResult | None = None

    def start(self) -> None:
        """Sync with the current user, then follow auth transitions."""
        self._auth.add_listener(self.on_user_changed)
        self.on_user_changed(self._auth.current_user_id())

    def on_user_changed(self, user_id: str | None) -> None:
        if user_id is None:
            if self._store.is_bound:
                logger.info("User logged out, clearing board state")
            self._store.unbind()
            self.last_result = None
            return

        if user_id == self._store.user_id:
            return

        logger.info("User %s logged in, binding board state", user_id)
        try:
            self.last_result = self._store.bind(user_id)
        except PersistenceError as e:
            logger.error("Could not load boards for user %s: %s", user_id, e)
            self.last_result = MutationResult.rejected(
                RejectionReason.STORAGE_UNAVAILABLE, "Boards could not be loaded"
            )
