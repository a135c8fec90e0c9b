import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException
from .. import models, schemas
from .bill_predictor import advance_due_date, detect_recurring_expenses, generate_bill_name
from .finance import ensure_member, expense_records, require_editor, utc_naive

logger = logging.getLogger(__name__)

# Patterns at or above this confidence become stored bills; the rest are only suggested.
CONFIDENCE_THRESHOLD = 70
AMOUNT_MATCH_RATIO = 0.10
REMINDER_WINDOW = timedelta(days=3)
REMINDER_COOLDOWN = timedelta(hours=24)

def find_matching_bill(db: Session, group_id: int, pattern: schemas.RecurringPatternOut) -> Optional[models.RecurringBill]:
    """Same category, amount within 10%, stored description containing the pattern's."""
    return (db.query(models.RecurringBill)
            .filter(models.RecurringBill.group_id == group_id,
                    models.RecurringBill.category == pattern.category,
                    models.RecurringBill.amount >= pattern.amount * (1 - AMOUNT_MATCH_RATIO),
                    models.RecurringBill.amount <= pattern.amount * (1 + AMOUNT_MATCH_RATIO),
                    models.RecurringBill.description.contains(pattern.description, autoescape=True))
            .order_by(models.RecurringBill.id)
            .first())

def analyze_group_expenses(db: Session, group_id: int, user_id: int) -> Dict[str, list]:
    patterns = detect_recurring_expenses(expense_records(db, group_id))
    results: Dict[str, list] = {"detected": [], "saved": []}

    for pattern in patterns:
        if pattern.confidence < CONFIDENCE_THRESHOLD:
            results["detected"].append(pattern)
            continue
        bill = find_matching_bill(db, group_id, pattern)
        if bill:
            bill.next_due_date = pattern.next_due_date
            bill.frequency = pattern.frequency.value
            bill.updated_at = datetime.utcnow()
            logger.info("updated recurring bill %s for group %s", bill.id, group_id)
        else:
            bill = models.RecurringBill(
                group_id=group_id,
                created_by_id=user_id,
                name=generate_bill_name(pattern.description),
                description=pattern.description,
                amount=pattern.amount,
                category=pattern.category,
                frequency=pattern.frequency.value,
                next_due_date=pattern.next_due_date,
            )
            db.add(bill)
            db.flush()
            logger.info("saved recurring bill %s (%s, %s) for group %s", bill.id, bill.name, bill.frequency, group_id)
        results["saved"].append(bill)

    return results

def send_due_reminders(db: Session, group_id: int, now: Optional[datetime] = None) -> List[models.BillReminder]:
    now = now or datetime.utcnow()
    due = (db.query(models.RecurringBill)
           .filter(models.RecurringBill.group_id == group_id,
                   models.RecurringBill.next_due_date <= now + REMINDER_WINDOW)
           .order_by(models.RecurringBill.next_due_date)
           .all())

    sent = []
    for bill in due:
        last_sent = max((r.sent_at for r in bill.reminders), default=None)
        if last_sent is not None and now - last_sent < REMINDER_COOLDOWN:
            continue
        reminder = models.BillReminder(bill=bill, status="sent", sent_at=now)
        db.add(reminder)
        if bill.next_due_date < now:
            bill.next_due_date = advance_due_date(bill.next_due_date, bill.frequency)
        sent.append(reminder)
    db.flush()
    logger.info("sent %d bill reminder(s) for group %s", len(sent), group_id)
    return sent

def get_bill(db: Session, group_id: int, bill_id: int) -> models.RecurringBill:
    bill = db.get(models.RecurringBill, bill_id)
    if not bill or bill.group_id != group_id:
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill

def create_bill(db: Session, group_id: int, data: schemas.RecurringBillCreate) -> models.RecurringBill:
    ensure_member(db, group_id, data.user_id)
    bill = models.RecurringBill(
        group_id=group_id,
        created_by_id=data.user_id,
        name=data.name,
        description=data.description,
        amount=data.amount,
        category=data.category,
        frequency=data.frequency.value,
        next_due_date=utc_naive(data.next_due_date),
    )
    db.add(bill)
    db.flush()
    logger.info("recurring bill %s created in group %s by user %s", bill.id, group_id, data.user_id)
    return bill

def update_bill(db: Session, group_id: int, bill_id: int, data: schemas.RecurringBillUpdate) -> models.RecurringBill:
    bill = get_bill(db, group_id, bill_id)
    require_editor(db, group_id, data.user_id, bill.created_by_id, "update")
    changes = data.model_dump(exclude_unset=True, exclude={"user_id"})
    for field, value in changes.items():
        if value is None:
            continue
        if field == "frequency":
            value = schemas.Frequency(value).value
        elif field == "next_due_date":
            value = utc_naive(value)
        setattr(bill, field, value)
    bill.updated_at = datetime.utcnow()
    db.flush()
    return bill

def delete_bill(db: Session, group_id: int, bill_id: int, user_id: int):
    bill = get_bill(db, group_id, bill_id)
    require_editor(db, group_id, user_id, bill.created_by_id, "delete")
    db.delete(bill)
    db.flush()
    logger.info("recurring bill %s deleted from group %s by user %s", bill_id, group_id, user_id)
