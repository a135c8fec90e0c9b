from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..database import get_db
from .. import models, schemas
from ..services.finance import user_groups, user_balance_summary, recent_activity

router = APIRouter()

def get_user(db: Session, user_id: int) -> models.User:
    u = db.get(models.User, user_id)
    if not u:
        raise HTTPException(status_code=404, detail="User not found")
    return u

@router.post("", response_model=schemas.UserOut)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    if db.query(models.User).filter_by(email=user.email).first():
        raise HTTPException(status_code=400, detail="Email already exists")
    u = models.User(name=user.name, email=user.email)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u

@router.get("/{user_id}", response_model=schemas.UserOut)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return get_user(db, user_id)

@router.get("/{user_id}/dashboard", response_model=schemas.UserDashboardOut)
def user_dashboard(user_id: int, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    groups = user_groups(db, user_id)
    group_ids = [g.id for g in groups]
    return schemas.UserDashboardOut(
        user=schemas.UserOut.model_validate(user),
        summary=user_balance_summary(db, user_id, group_ids),
        recent_activity=recent_activity(db, user_id, group_ids),
        groups=[schemas.GroupOut.model_validate(g) for g in groups],
    )
