from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ..database import get_db
from .. import models, schemas
from ..services.bills import analyze_group_expenses, send_due_reminders, create_bill, update_bill, delete_bill
from ..services.finance import get_group, ensure_member

router = APIRouter()

@router.post("/analyze", response_model=schemas.BillAnalysisOut)
def analyze(group_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    get_group(db, group_id)
    ensure_member(db, group_id, user_id)
    results = analyze_group_expenses(db, group_id, user_id)
    db.commit()
    return schemas.BillAnalysisOut(
        detected=results["detected"],
        saved=[schemas.RecurringBillOut.model_validate(b) for b in results["saved"]],
    )

@router.get("", response_model=list[schemas.RecurringBillOut])
def list_bills(group_id: int, db: Session = Depends(get_db)):
    get_group(db, group_id)
    return (db.query(models.RecurringBill).filter_by(group_id=group_id)
            .order_by(models.RecurringBill.next_due_date).all())

@router.post("/reminders", response_model=list[schemas.BillReminderOut])
def reminders(group_id: int, db: Session = Depends(get_db)):
    get_group(db, group_id)
    sent = send_due_reminders(db, group_id)
    db.commit()
    return sent

@router.post("", response_model=schemas.RecurringBillOut)
def add_bill(group_id: int, data: schemas.RecurringBillCreate, db: Session = Depends(get_db)):
    get_group(db, group_id)
    bill = create_bill(db, group_id, data)
    db.commit(); db.refresh(bill)
    return bill

@router.put("/{bill_id}", response_model=schemas.RecurringBillOut)
def edit_bill(group_id: int, bill_id: int, data: schemas.RecurringBillUpdate, db: Session = Depends(get_db)):
    get_group(db, group_id)
    bill = update_bill(db, group_id, bill_id, data)
    db.commit(); db.refresh(bill)
    return bill

@router.delete("/{bill_id}")
def remove_bill(group_id: int, bill_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    get_group(db, group_id)
    delete_bill(db, group_id, bill_id, user_id)
    db.commit()
    return {"message": "Bill deleted"}
