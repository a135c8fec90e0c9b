import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException
from .. import models, schemas
from .balances import round2
from .categories import categorize_expense, category_emoji
from ..errors import InvalidInputError
from .splits import split_equal, validate_custom_split

logger = logging.getLogger(__name__)

def get_group(db: Session, group_id: int) -> models.Group:
    g = db.get(models.Group, group_id)
    if not g:
        raise HTTPException(status_code=404, detail="Group not found")
    return g

def member_ids(db: Session, group_id: int) -> List[int]:
    rows = db.query(models.GroupMember).filter_by(group_id=group_id).order_by(models.GroupMember.id).all()
    return [m.user_id for m in rows]

def ensure_member(db: Session, group_id: int, user_id: int):
    if not db.query(models.GroupMember).filter_by(group_id=group_id, user_id=user_id).first():
        raise HTTPException(status_code=403, detail=f"User {user_id} is not a member of group {group_id}")

def utc_naive(when: datetime) -> datetime:
    # stored timestamps are naive UTC, like datetime.utcnow()
    if when.tzinfo is not None:
        return when.astimezone(timezone.utc).replace(tzinfo=None)
    return when

def require_editor(db: Session, group_id: int, user_id: int, owner_id: int, action: str):
    """Only the creator of a row or a group admin may change it."""
    m = db.query(models.GroupMember).filter_by(group_id=group_id, user_id=user_id).first()
    if not m:
        raise HTTPException(status_code=403, detail=f"User {user_id} is not a member of group {group_id}")
    if m.role != "admin" and owner_id != user_id:
        raise HTTPException(status_code=403, detail=f"Only the creator or a group admin can {action} this")

def expense_records(db: Session, group_id: int) -> List[schemas.ExpenseRecord]:
    """The group's expenses with their shares, oldest first."""
    rows = (db.query(models.Expense)
            .options(selectinload(models.Expense.shares))
            .filter_by(group_id=group_id)
            .order_by(models.Expense.created_at, models.Expense.id)
            .all())
    return [schemas.ExpenseRecord.model_validate(e) for e in rows]

def add_expense(db: Session, group: models.Group, data: schemas.ExpenseCreate) -> models.Expense:
    members = member_ids(db, group.id)
    ensure_member(db, group.id, data.user_id)
    payer_id = data.payer_id or data.user_id
    if payer_id not in members:
        raise HTTPException(status_code=400, detail="Payer must be a member of the group")

    if data.split_type == "equal":
        shares = split_equal(data.amount, members)
    else:
        shares = validate_custom_split(data.amount, data.split_details, members)

    category = data.category or categorize_expense(data.description)
    exp = models.Expense(group_id=group.id, payer_id=payer_id, created_by_id=data.user_id, amount=data.amount,
                         description=data.description, category=category,
                         created_at=utc_naive(data.created_at) if data.created_at else datetime.utcnow())
    exp.shares = [models.ExpenseShare(user_id=uid, amount=amt) for uid, amt in shares.items()]
    db.add(exp)
    db.flush()
    logger.info("expense %s added to group %s (%s split, %d shares)", exp.id, group.id, data.split_type, len(shares))
    return exp

def get_expense(db: Session, group_id: int, expense_id: int) -> models.Expense:
    exp = db.get(models.Expense, expense_id)
    if not exp or exp.group_id != group_id:
        raise HTTPException(status_code=404, detail="Expense not found")
    return exp

def update_expense(db: Session, group_id: int, expense_id: int, data: schemas.ExpenseUpdate) -> models.Expense:
    exp = get_expense(db, group_id, expense_id)
    require_editor(db, group_id, data.user_id, exp.created_by_id, "update")
    members = member_ids(db, group_id)
    if data.payer_id is not None and data.payer_id not in members:
        raise HTTPException(status_code=400, detail="Payer must be a member of the group")

    amount = data.amount if data.amount is not None else exp.amount
    if data.split_type == "equal":
        shares = split_equal(amount, members)
    elif data.split_type == "custom":
        shares = validate_custom_split(amount, data.split_details, members)
    elif amount != exp.amount:
        # existing shares would no longer add up to the amount
        raise InvalidInputError("split_type is required when changing the amount.")
    else:
        shares = None

    exp.amount = amount
    if data.payer_id is not None:
        exp.payer_id = data.payer_id
    if data.description:
        exp.description = data.description
    if data.category:
        exp.category = data.category
    elif data.description:
        exp.category = categorize_expense(data.description)
    if shares is not None:
        exp.shares = [models.ExpenseShare(user_id=uid, amount=amt) for uid, amt in shares.items()]
    db.flush()
    logger.info("expense %s in group %s updated by user %s", exp.id, group_id, data.user_id)
    return exp

def delete_expense(db: Session, group_id: int, expense_id: int, user_id: int):
    exp = get_expense(db, group_id, expense_id)
    require_editor(db, group_id, user_id, exp.created_by_id, "delete")
    db.delete(exp)
    db.flush()
    logger.info("expense %s deleted from group %s by user %s", expense_id, group_id, user_id)

def group_stats(db: Session, group_id: int, now: Optional[datetime] = None) -> schemas.GroupStats:
    now = now or datetime.utcnow()
    expenses = db.query(models.Expense).filter_by(group_id=group_id).all()
    totals: Dict[str, float] = {}
    total = 0.0
    recent = 0
    for e in expenses:
        category = e.category or schemas.UNCATEGORIZED
        totals[category] = totals.get(category, 0.0) + e.amount
        total += e.amount
        if e.created_at >= now - timedelta(days=30):
            recent += 1
    top = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:3]
    return schemas.GroupStats(
        total_amount=round(total, 2),
        total_count=len(expenses),
        recent_activity=recent,
        top_categories=[
            schemas.CategoryTotal(category=c, amount=round(a, 2),
                                  percentage=round(a / total * 100) if total > 0 else 0,
                                  emoji=category_emoji(c))
            for c, a in top
        ],
    )

def user_groups(db: Session, user_id: int) -> List[models.Group]:
    return (db.query(models.Group)
            .join(models.GroupMember, models.GroupMember.group_id == models.Group.id)
            .filter(models.GroupMember.user_id == user_id)
            .order_by(models.Group.id)
            .all())

def user_balance_summary(db: Session, user_id: int, group_ids: List[int]) -> schemas.BalanceSummary:
    paid = owed = 0.0
    expenses = (db.query(models.Expense).options(selectinload(models.Expense.shares))
                .filter(models.Expense.group_id.in_(group_ids)).all()) if group_ids else []
    for e in expenses:
        if e.payer_id == user_id:
            paid += e.amount
        owed += sum(s.amount for s in e.shares if s.user_id == user_id)
    return schemas.BalanceSummary(total_paid=round2(paid), total_owed=round2(owed), net_balance=round2(paid - owed))

def recent_activity(db: Session, user_id: int, group_ids: List[int], limit: int = 5) -> List[schemas.ActivityOut]:
    if not group_ids:
        return []
    rows = (db.query(models.Expense, models.Group.name)
            .join(models.Group, models.Group.id == models.Expense.group_id)
            .filter(models.Expense.group_id.in_(group_ids))
            .order_by(models.Expense.created_at.desc(), models.Expense.id.desc())
            .limit(limit)
            .all())
    out = []
    for e, group_name in rows:
        share = sum(s.amount for s in e.shares if s.user_id == user_id)
        is_payer = e.payer_id == user_id
        out.append(schemas.ActivityOut(
            id=e.id, description=e.description, category=e.category or schemas.UNCATEGORIZED, date=e.created_at,
            group_name=group_name, amount=e.amount, user_share=share, payer_id=e.payer_id, is_payer=is_payer,
            impact=round2(e.amount - share) if is_payer else round2(-share),
        ))
    return out
