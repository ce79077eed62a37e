from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional
from datetime import datetime
from core.dependencies import get_current_user_id, get_ledger_service
from services.ledger_service import LedgerService

router = APIRouter()

# Fields stay loosely typed so LedgerService reports the validation errors
class ExpenseCreate(BaseModel):
    title: Optional[Any] = None
    amount: Optional[Any] = None
    category: Optional[Any] = None
    date: Optional[Any] = None

class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    amount: float
    category: str
    date: datetime

class DeleteResponse(BaseModel):
    message: str
    id: str

@router.post("", response_model=ExpenseResponse)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user_id: str = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Create a new expense."""
    return await ledger.add_expense(
        current_user_id,
        expense_data.title,
        expense_data.amount,
        expense_data.category,
        expense_data.date,
    )

@router.get("", response_model=List[ExpenseResponse])
async def get_expenses(
    current_user_id: str = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Get all expenses for the current user."""
    return await ledger.list_expenses(current_user_id)

@router.delete("/{expense_id}", response_model=DeleteResponse)
async def delete_expense(
    expense_id: str,
    current_user_id: str = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service)
):
    """Delete an expense owned by the current user."""
    return await ledger.delete_expense(current_user_id, expense_id)
