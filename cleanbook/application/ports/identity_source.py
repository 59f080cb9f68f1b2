from __future__ import annotations

from abc import ABC, abstractmethod

from cleanbook.domain.entities.session import Session


class IdentitySourcePort(ABC):
    @abstractmethod
    def current_session(self) -> Session:
        raise NotImplementedError
