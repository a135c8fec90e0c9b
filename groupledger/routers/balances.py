from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services.balances import compute_balances, generate_settlements
from ..services.finance import get_group, member_ids, expense_records

router = APIRouter()

@router.get("", response_model=schemas.BalancesOut)
def get_balances(group_id: int, db: Session = Depends(get_db)):
    get_group(db, group_id)
    balances = compute_balances(member_ids(db, group_id), expense_records(db, group_id))
    return schemas.BalancesOut(balances=balances, settlements=generate_settlements(balances))
