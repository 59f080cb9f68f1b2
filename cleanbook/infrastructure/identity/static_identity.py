from __future__ import annotations

from cleanbook.application.ports.identity_source import IdentitySourcePort
from cleanbook.domain.entities.session import Session


class StaticIdentitySource(IdentitySourcePort):
    """Session holder for local runs and tests; the host app updates it on sign-in."""

    def __init__(self, session: Session | None = None) -> None:
        self._session = session or Session.guest()

    def current_session(self) -> Session:
        return self._session

    def set_session(self, session: Session) -> None:
        self._session = session

    def sign_in(self, user_id: str) -> None:
        self._session = Session.authenticated(user_id)

    def sign_out(self) -> None:
        self._session = Session.guest()
