from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Batch


class BatchRepository(Protocol):
    def get_by_id(self, batch_id: str) -> Optional[Batch]:
        raise NotImplementedError

    def list_batches(self, *, domain_id: Optional[str] = None) -> Sequence[Batch]:
        raise NotImplementedError

    def add(self, batch: Batch) -> str:
        raise NotImplementedError

    def delete(self, batch_id: str) -> bool:
        raise NotImplementedError
