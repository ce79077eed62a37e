"""
Abstract storage interface for accounts and expenses.

Services talk to storage only through these interfaces, so the SQL store
can be swapped for the in-memory one (tests, local development) without
touching business logic. Records cross the boundary as frozen dataclasses.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class AccountRecord:
    id: str
    username: str
    hashed_password: str
    created_at: datetime


@dataclass(frozen=True)
class ExpenseRecord:
    id: str
    user_id: str
    title: str
    amount: float
    category: str
    date: datetime


class AccountStore(ABC):
    """Storage operations needed by the identity service."""

    @abstractmethod
    async def create_account(self, username: str, hashed_password: str) -> AccountRecord:
        """
        Persist a new account.

        Raises:
            DuplicateError: If the username is already registered
            StorageError: If the write fails
        """

    @abstractmethod
    async def find_account_by_username(self, username: str) -> Optional[AccountRecord]:
        """Return the account registered under ``username``, or None."""


class ExpenseStore(ABC):
    """Storage operations needed by the ledger service."""

    @abstractmethod
    async def create_expense(
        self,
        user_id: str,
        title: str,
        amount: float,
        category: str,
        date: datetime,
    ) -> ExpenseRecord:
        """
        Persist a new expense owned by ``user_id``.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    async def list_expenses(self, user_id: str) -> List[ExpenseRecord]:
        """Return every expense owned by ``user_id`` in storage order."""

    @abstractmethod
    async def delete_expense(self, expense_id: str, user_id: str) -> bool:
        """
        Delete the expense matching both ``expense_id`` and ``user_id``.

        The match and the delete happen in one indivisible step.

        Returns:
            True if a record was deleted, False if nothing matched
        """


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
