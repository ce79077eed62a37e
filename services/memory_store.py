import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from services.store import (
    AccountRecord,
    AccountStore,
    DuplicateError,
    ExpenseRecord,
    ExpenseStore,
)


class MemoryStore(AccountStore, ExpenseStore):
    """In-process store used by the tests and by STORE_BACKEND=memory.

    None of the methods await between reading and writing the dictionaries,
    so each operation completes in one step of the event loop.
    """

    def __init__(self):
        self.users_db: Dict[str, AccountRecord] = {}
        self.expenses_db: Dict[str, ExpenseRecord] = {}

    async def create_account(self, username: str, hashed_password: str) -> AccountRecord:
        if any(user.username == username for user in self.users_db.values()):
            raise DuplicateError(f"username {username!r} already exists")

        account = AccountRecord(
            id=str(uuid.uuid4()),
            username=username,
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc),
        )
        self.users_db[account.id] = account
        return account

    async def find_account_by_username(self, username: str) -> Optional[AccountRecord]:
        for user in self.users_db.values():
            if user.username == username:
                return user
        return None

    async def create_expense(
        self,
        user_id: str,
        title: str,
        amount: float,
        category: str,
        date: datetime,
    ) -> ExpenseRecord:
        expense = ExpenseRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            amount=amount,
            category=category,
            date=date,
        )
        self.expenses_db[expense.id] = expense
        return expense

    async def list_expenses(self, user_id: str) -> List[ExpenseRecord]:
        return [e for e in self.expenses_db.values() if e.user_id == user_id]

    async def delete_expense(self, expense_id: str, user_id: str) -> bool:
        expense = self.expenses_db.get(expense_id)
        if expense is None or expense.user_id != user_id:
            return False
        del self.expenses_db[expense_id]
        return True
