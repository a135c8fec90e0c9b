from typing import Dict, List, Optional
from ..errors import InvalidInputError
from ..schemas import ShareIn
from .balances import SETTLED_TOLERANCE, round2

def split_equal(amount: float, member_ids: List[int]) -> Dict[int, float]:
    if not member_ids:
        raise InvalidInputError("Cannot split an expense among zero members.")
    per = round2(amount / len(member_ids))
    shares = {uid: per for uid in member_ids}
    remainder = round2(amount - per * len(member_ids))
    if remainder != 0:
        # first member absorbs the rounding cent(s)
        first = member_ids[0]
        shares[first] = round2(shares[first] + remainder)
    return shares

def validate_custom_split(amount: float, details: Optional[List[ShareIn]], member_ids: List[int]) -> Dict[int, float]:
    if not details:
        raise InvalidInputError("Custom split requires split details.")
    members = set(member_ids)
    shares: Dict[int, float] = {}
    for d in details:
        if d.user_id not in members:
            raise InvalidInputError(f"User {d.user_id} is not a member of this group")
        if d.amount <= 0:
            raise InvalidInputError(f"Share for user {d.user_id} must be positive.")
        if d.user_id in shares:
            raise InvalidInputError(f"User {d.user_id} appears more than once in split details.")
        shares[d.user_id] = d.amount
    total = sum(shares.values())
    if round2(abs(total - amount)) > SETTLED_TOLERANCE:
        raise InvalidInputError(f"Total split amount ({round2(total)}) must equal expense amount ({amount}).")
    return shares
