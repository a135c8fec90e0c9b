from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services.balances import compute_balances, generate_settlements
from ..services.finance import get_group, member_ids, expense_records, group_stats

router = APIRouter()

@router.get("", response_model=schemas.DashboardOut)
def group_dashboard(group_id: int, db: Session = Depends(get_db)):
    group = get_group(db, group_id)
    members = member_ids(db, group_id)
    balances = compute_balances(members, expense_records(db, group_id))
    return schemas.DashboardOut(
        group=schemas.GroupOut.model_validate(group),
        member_count=len(members),
        stats=group_stats(db, group_id),
        balances=balances,
        settlements=generate_settlements(balances),
    )
