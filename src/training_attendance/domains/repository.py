from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Domain


class DomainRepository(Protocol):
    """Repository interface for Domain.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, domain_id: str) -> Optional[Domain]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Domain]:
        raise NotImplementedError

    def add(self, domain: Domain) -> str:
        raise NotImplementedError

    def rename(self, domain_id: str, *, name: str) -> bool:
        raise NotImplementedError

    def delete(self, domain_id: str) -> bool:
        raise NotImplementedError
