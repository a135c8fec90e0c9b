import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Sequence
from ..schemas import BalanceOut, ExpenseRecord, SettlementOut

logger = logging.getLogger(__name__)

# Anything smaller than a cent counts as settled.
SETTLED_TOLERANCE = 0.01

def round2(value: float) -> float:
    # built-in round() is half-even on binary floats
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

def compute_balances(members: Iterable[int], expenses: Iterable[ExpenseRecord]) -> List[BalanceOut]:
    """Paid, owed and net balance per member, most-owed first."""
    paid: Dict[int, float] = {}
    owed: Dict[int, float] = {}
    for uid in members:
        paid[uid] = 0.0
        owed[uid] = 0.0

    for e in expenses:
        if e.payer_id in paid:
            paid[e.payer_id] += e.amount
        for s in e.shares:
            if s.member_id in owed:
                owed[s.member_id] += s.amount

    out = [
        BalanceOut(member_id=uid, paid=round2(paid[uid]), owed=round2(owed[uid]), balance=round2(paid[uid] - owed[uid]))
        for uid in paid
    ]
    # stable: equal balances keep member order
    out.sort(key=lambda b: b.balance, reverse=True)
    logger.debug("computed balances for %d members", len(out))
    return out

def generate_settlements(balances: Sequence[BalanceOut]) -> List[SettlementOut]:
    """Largest debtor pays largest creditor until one side is clear; never emits a cent or less."""
    debtors = [[b.member_id, b.balance] for b in balances if b.balance < 0 and abs(b.balance) >= SETTLED_TOLERANCE]
    creditors = [[b.member_id, b.balance] for b in balances if b.balance > 0 and abs(b.balance) >= SETTLED_TOLERANCE]
    debtors.sort(key=lambda x: x[1])                  # most negative first
    creditors.sort(key=lambda x: x[1], reverse=True)  # most positive first

    transfers: List[SettlementOut] = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]
        amount = min(abs(debtor[1]), creditor[1])
        if amount > SETTLED_TOLERANCE:
            transfers.append(SettlementOut(from_id=debtor[0], to_id=creditor[0], amount=round2(amount)))
        debtor[1] += amount
        creditor[1] -= amount
        if abs(debtor[1]) < SETTLED_TOLERANCE:
            i += 1
        if abs(creditor[1]) < SETTLED_TOLERANCE:
            j += 1

    if i < len(debtors) or j < len(creditors):
        logger.warning("balances do not net to zero; %d debtor(s) and %d creditor(s) left unsettled",
                       len(debtors) - i, len(creditors) - j)
    return transfers

def unsettled_after(balances: Sequence[BalanceOut], settlements: Iterable[SettlementOut]) -> Dict[int, float]:
    """Members still holding a balance of a cent or more once every transfer is applied."""
    remaining = {b.member_id: b.balance for b in balances}
    for t in settlements:
        remaining[t.from_id] = remaining.get(t.from_id, 0.0) + t.amount
        remaining[t.to_id] = remaining.get(t.to_id, 0.0) - t.amount
    return {uid: round2(amt) for uid, amt in remaining.items() if abs(amt) >= SETTLED_TOLERANCE}
