import math
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import InternalError, NotFoundError, ValidationError
from services.store import ExpenseRecord, ExpenseStore, StorageError
from utils.logger import logger

REQUIRED_FIELDS_MESSAGE = "title, amount, and category are required"
POSITIVE_AMOUNT_MESSAGE = "amount must be a positive number"
INVALID_DATE_MESSAGE = "date must be a valid timestamp"

_datetime_adapter = TypeAdapter(datetime)


def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _parse_amount(value: Any) -> float:
    # bool is an int subclass; "true" is not an amount
    if isinstance(value, bool):
        raise ValidationError(POSITIVE_AMOUNT_MESSAGE)
    try:
        amount = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(POSITIVE_AMOUNT_MESSAGE)
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(POSITIVE_AMOUNT_MESSAGE)
    return amount


def _parse_date(value: Any) -> datetime:
    """Resolve the caller's timestamp, defaulting to now. Always UTC-aware."""
    if value is None or value == "":
        return datetime.now(timezone.utc)
    if isinstance(value, bool):
        raise ValidationError(INVALID_DATE_MESSAGE)
    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValidationError(INVALID_DATE_MESSAGE)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # offset pushes the instant past datetime.min or datetime.max
        raise ValidationError(INVALID_DATE_MESSAGE)


class LedgerService:
    """Service for managing a user's expenses."""

    def __init__(self, expenses: ExpenseStore):
        self.expenses = expenses

    async def add_expense(
        self,
        user_id: str,
        title: Any,
        amount: Any,
        category: Any,
        date: Any = None,
    ) -> ExpenseRecord:
        """Validate and persist a new expense owned by ``user_id``."""
        clean_title = _clean_text(title)
        clean_category = _clean_text(category)
        if clean_title is None or clean_category is None or amount is None:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        clean_amount = _parse_amount(amount)
        occurred_at = _parse_date(date)

        try:
            expense = await self.expenses.create_expense(
                user_id, clean_title, clean_amount, clean_category, occurred_at
            )
        except StorageError as e:
            logger.error(f"Error adding expense: {e}")
            raise InternalError("Failed to add expense")

        logger.info(f"Created expense: {expense.id} for user: {user_id}")
        return expense

    async def list_expenses(self, user_id: str) -> List[ExpenseRecord]:
        """Get all expenses owned by ``user_id``."""
        try:
            return await self.expenses.list_expenses(user_id)
        except StorageError as e:
            logger.error(f"Error fetching expenses: {e}")
            raise InternalError("Failed to fetch expenses")

    async def delete_expense(self, user_id: str, expense_id: str) -> dict:
        """Delete one of the caller's expenses.

        Someone else's expense is reported exactly like a missing one.
        """
        try:
            deleted = await self.expenses.delete_expense(expense_id, user_id)
        except StorageError as e:
            logger.error(f"Error deleting expense: {e}")
            raise InternalError("Failed to delete expense")

        if not deleted:
            raise NotFoundError()

        logger.info(f"Deleted expense: {expense_id}")
        return {"message": "Deleted", "id": expense_id}
