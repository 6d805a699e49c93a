"""Interface shared by authenticated key-value stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple


class AuthenticatedKV(ABC):
    """A persistent key-value map whose lookups come with proofs.

    ``insert`` and ``remove`` return a new store rather than changing
    this one in place.
    """

    @abstractmethod
    def commit(self) -> Any:
        """Return the commitment to the current contents."""

    @staticmethod
    @abstractmethod
    def check_proof(
        key: str, result: Optional[str], proof: Any, commitment: Any
    ) -> bool:
        """Return True if ``proof`` shows ``key`` maps to ``result``."""

    @abstractmethod
    def insert(self, key: str, value: str) -> "AuthenticatedKV":
        """Return a store with ``key`` mapped to ``value``."""

    @abstractmethod
    def get(self, key: str) -> Tuple[Optional[str], Any]:
        """Return the value for ``key`` (or None) and a lookup proof."""

    @abstractmethod
    def remove(self, key: str) -> "AuthenticatedKV":
        """Return a store without ``key``."""