from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ..database import get_db
from .. import models, schemas
from ..services.finance import get_group, add_expense, get_expense, update_expense, delete_expense

router = APIRouter()

@router.post("", response_model=schemas.ExpenseOut)
def create_expense(group_id: int, data: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    group = get_group(db, group_id)
    exp = add_expense(db, group, data)
    db.commit(); db.refresh(exp)
    return exp

@router.get("", response_model=list[schemas.ExpenseOut])
def list_expenses(group_id: int, db: Session = Depends(get_db)):
    get_group(db, group_id)
    return (db.query(models.Expense).filter_by(group_id=group_id)
            .order_by(models.Expense.created_at.desc()).all())

@router.get("/{expense_id}", response_model=schemas.ExpenseOut)
def read_expense(group_id: int, expense_id: int, db: Session = Depends(get_db)):
    get_group(db, group_id)
    return get_expense(db, group_id, expense_id)

@router.put("/{expense_id}", response_model=schemas.ExpenseOut)
def edit_expense(group_id: int, expense_id: int, data: schemas.ExpenseUpdate, db: Session = Depends(get_db)):
    get_group(db, group_id)
    exp = update_expense(db, group_id, expense_id, data)
    db.commit(); db.refresh(exp)
    return exp

@router.delete("/{expense_id}")
def remove_expense(group_id: int, expense_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    get_group(db, group_id)
    delete_expense(db, group_id, expense_id, user_id)
    db.commit()
    return {"message": "Expense deleted"}
