from pydantic import BaseModel, Field, ConfigDict, EmailStr, AliasChoices, field_validator, model_validator
from typing import List, Optional, Literal
from datetime import datetime
from enum import Enum

UNCATEGORIZED = "Uncategorized"

class Frequency(str, Enum):
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"

class UserCreate(BaseModel):
    name: str
    email: EmailStr

class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    model_config = ConfigDict(from_attributes=True)

class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = ""

class GroupOut(BaseModel):
    id: int
    name: str
    description: str
    model_config = ConfigDict(from_attributes=True)

class AddMember(BaseModel):
    user_id: int
    role: Literal["member", "admin"] = "member"

# Records handed to the balance and bill engines. They read straight off the
# ORM rows (Expense.payer_id, ExpenseShare.user_id) or from plain keyword args.

class ShareRecord(BaseModel):
    member_id: int = Field(validation_alias=AliasChoices("member_id", "user_id"))
    amount: float
    model_config = ConfigDict(from_attributes=True, frozen=True)

class ExpenseRecord(BaseModel):
    id: int
    amount: float
    payer_id: int
    group_id: Optional[int] = None
    created_at: datetime
    category: str = UNCATEGORIZED
    description: str = ""
    shares: List[ShareRecord] = []
    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return v or UNCATEGORIZED

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v):
        return v or ""

class ShareIn(BaseModel):
    user_id: int
    amount: float = Field(gt=0)

class ExpenseCreate(BaseModel):
    user_id: int = Field(description="Member logging the expense")
    payer_id: Optional[int] = None                                    # defaults to user_id
    amount: float = Field(gt=0)
    description: str = Field(min_length=1)
    category: Optional[str] = None
    split_type: Literal["equal", "custom"]
    split_details: Optional[List[ShareIn]] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="after")
    def custom_needs_details(self):
        if self.split_type == "custom" and not self.split_details:
            raise ValueError("split_details is required for a custom split")
        return self

class ExpenseUpdate(BaseModel):
    user_id: int = Field(description="Member making the change")
    payer_id: Optional[int] = None
    amount: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    split_type: Optional[Literal["equal", "custom"]] = None
    split_details: Optional[List[ShareIn]] = None

    @model_validator(mode="after")
    def custom_needs_details(self):
        if self.split_type == "custom" and not self.split_details:
            raise ValueError("split_details is required for a custom split")
        return self

class ShareOut(BaseModel):
    user_id: int
    amount: float
    model_config = ConfigDict(from_attributes=True)

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    payer_id: int
    amount: float
    description: str
    category: str
    created_at: datetime
    shares: List[ShareOut]
    model_config = ConfigDict(from_attributes=True)

class BalanceOut(BaseModel):
    member_id: int
    paid: float
    owed: float
    balance: float

class SettlementOut(BaseModel):
    from_id: int = Field(alias="from")
    to_id: int = Field(alias="to")
    amount: float
    model_config = ConfigDict(populate_by_name=True)

class BalancesOut(BaseModel):
    balances: List[BalanceOut]
    settlements: List[SettlementOut]

class CategoryTotal(BaseModel):
    category: str
    amount: float
    percentage: int
    emoji: str

class GroupStats(BaseModel):
    total_amount: float
    total_count: int
    recent_activity: int
    top_categories: List[CategoryTotal]

class DashboardOut(BaseModel):
    group: GroupOut
    member_count: int
    stats: GroupStats
    balances: List[BalanceOut]
    settlements: List[SettlementOut]

class RecurringPatternOut(BaseModel):
    description: str
    amount: float
    category: str
    frequency: Frequency
    next_due_date: datetime
    confidence: int = Field(ge=0, le=100)
    occurrences: int = Field(ge=2)

class RecurringBillOut(BaseModel):
    id: int
    group_id: int
    name: str
    description: str
    amount: float
    category: str
    frequency: Frequency
    next_due_date: datetime
    model_config = ConfigDict(from_attributes=True)

class BillAnalysisOut(BaseModel):
    detected: List[RecurringPatternOut]
    saved: List[RecurringBillOut]

class BillReminderOut(BaseModel):
    id: int
    bill_id: int
    status: str
    sent_at: datetime
    model_config = ConfigDict(from_attributes=True)

class RecurringBillCreate(BaseModel):
    user_id: int
    name: str = Field(min_length=1)
    description: str = ""
    amount: float = Field(gt=0)
    category: str = UNCATEGORIZED
    frequency: Frequency
    next_due_date: datetime

class RecurringBillUpdate(BaseModel):
    user_id: int
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    amount: Optional[float] = Field(default=None, gt=0)
    category: Optional[str] = None
    frequency: Optional[Frequency] = None
    next_due_date: Optional[datetime] = None

class BalanceSummary(BaseModel):
    total_paid: float
    total_owed: float
    net_balance: float

class ActivityOut(BaseModel):
    id: int
    description: str
    category: str
    date: datetime
    group_name: str
    amount: float
    user_share: float
    payer_id: int
    is_payer: bool
    impact: float

class UserDashboardOut(BaseModel):
    user: UserOut
    summary: BalanceSummary
    recent_activity: List[ActivityOut]
    groups: List[GroupOut]
