"""SQLAlchemy implementation of the account and expense stores."""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from connect_db import SessionLocal, session_scope
from models.models import Expense, User
from services.store import (
    AccountRecord,
    AccountStore,
    DuplicateError,
    ExpenseRecord,
    ExpenseStore,
    StorageError,
)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _account_record(user: User) -> AccountRecord:
    return AccountRecord(
        id=user.id,
        username=user.username,
        hashed_password=user.hashed_password,
        created_at=_as_utc(user.created_at),
    )


def _expense_record(expense: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=expense.id,
        user_id=expense.user_id,
        title=expense.title,
        amount=expense.amount,
        category=expense.category,
        date=_as_utc(expense.date),
    )


class SQLStore(AccountStore, ExpenseStore):
    """Store backed by a relational database.

    Each operation runs in its own short-lived session on the worker thread
    pool so that database I/O never blocks the event loop.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    async def create_account(self, username: str, hashed_password: str) -> AccountRecord:
        return await run_in_threadpool(self._create_account, username, hashed_password)

    async def find_account_by_username(self, username: str) -> Optional[AccountRecord]:
        return await run_in_threadpool(self._find_account_by_username, username)

    async def create_expense(
        self,
        user_id: str,
        title: str,
        amount: float,
        category: str,
        date: datetime,
    ) -> ExpenseRecord:
        return await run_in_threadpool(
            self._create_expense, user_id, title, amount, category, date
        )

    async def list_expenses(self, user_id: str) -> List[ExpenseRecord]:
        return await run_in_threadpool(self._list_expenses, user_id)

    async def delete_expense(self, expense_id: str, user_id: str) -> bool:
        return await run_in_threadpool(self._delete_expense, expense_id, user_id)

    def _create_account(self, username: str, hashed_password: str) -> AccountRecord:
        try:
            with session_scope(self._session_factory) as db:
                user = User(username=username, hashed_password=hashed_password)
                db.add(user)
                db.flush()
                db.refresh(user)
                return _account_record(user)
        except IntegrityError as e:
            raise DuplicateError(f"username {username!r} already exists") from e
        except SQLAlchemyError as e:
            raise StorageError(f"create account failed: {e}") from e

    def _find_account_by_username(self, username: str) -> Optional[AccountRecord]:
        try:
            with session_scope(self._session_factory) as db:
                user = db.scalars(select(User).where(User.username == username)).first()
                return _account_record(user) if user else None
        except SQLAlchemyError as e:
            raise StorageError(f"account lookup failed: {e}") from e

    def _create_expense(
        self,
        user_id: str,
        title: str,
        amount: float,
        category: str,
        date: datetime,
    ) -> ExpenseRecord:
        try:
            with session_scope(self._session_factory) as db:
                expense = Expense(
                    user_id=user_id,
                    title=title,
                    amount=amount,
                    category=category,
                    date=date,
                )
                db.add(expense)
                db.flush()
                db.refresh(expense)
                return _expense_record(expense)
        except SQLAlchemyError as e:
            raise StorageError(f"create expense failed: {e}") from e

    def _list_expenses(self, user_id: str) -> List[ExpenseRecord]:
        try:
            with session_scope(self._session_factory) as db:
                rows = db.scalars(select(Expense).where(Expense.user_id == user_id))
                return [_expense_record(expense) for expense in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"list expenses failed: {e}") from e

    def _delete_expense(self, expense_id: str, user_id: str) -> bool:
        try:
            with session_scope(self._session_factory) as db:
                # One DELETE statement: ownership check and removal are indivisible
                result = db.execute(
                    delete(Expense).where(
                        Expense.id == expense_id,
                        Expense.user_id == user_id,
                    )
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise StorageError(f"delete expense failed: {e}") from e
