from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..database import get_db
from .. import models, schemas
from ..services.finance import get_group

router = APIRouter()

@router.post("", response_model=schemas.GroupOut)
def create_group(group: schemas.GroupCreate, db: Session = Depends(get_db)):
    g = models.Group(name=group.name, description=group.description or "")
    db.add(g)
    db.commit()
    db.refresh(g)
    return g

@router.post("/{group_id}/members")
def add_member(group_id: int, member: schemas.AddMember, db: Session = Depends(get_db)):
    get_group(db, group_id)
    if not db.get(models.User, member.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    if db.query(models.GroupMember).filter_by(group_id=group_id, user_id=member.user_id).first():
        return {"message": "Already a member"}
    db.add(models.GroupMember(group_id=group_id, user_id=member.user_id, role=member.role))
    db.commit()
    return {"message": "Member added"}
