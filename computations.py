"""
Business logic and computations for SplitBill
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, List, Optional

from models import Expense, Group, Person, Settlement
from utils import parse_date, parse_datetime, round_currency

logger = logging.getLogger(__name__)

# balances within one cent of zero count as settled (exclusive bound)
SETTLE_THRESHOLD = 0.01


class InvalidArgument(ValueError):
    """Raised when an operation receives input it cannot compute on"""


def calculate_expense_total(expense: Expense) -> float:
    """Sum of an expense's item amounts"""
    return sum((item.amount for item in expense.items), 0.0)


def aggregate_person_totals(expenses: List[Expense]) -> Dict[str, float]:
    """
    Sum item amounts per person id.
    People without items are absent; callers treat a missing key as zero.
    """
    totals: Dict[str, float] = {}
    for e in expenses:
        for item in e.items:
            totals[item.person_id] = totals.get(item.person_id, 0.0) + item.amount
    return totals


def calculate_balances(people: List[Person], expenses: List[Expense]) -> Dict[str, float]:
    """
    Net balance per person against an equal split of total spend.
    positive -> should receive; negative -> should pay.
    The returned dict follows the order of `people`.
    """
    if not people:
        raise InvalidArgument("cannot calculate balances for a group without people")

    person_totals = aggregate_person_totals(expenses)
    total_expenses = sum(person_totals.values(), 0.0)
    average_per_person = total_expenses / len(people)

    return {p.id: person_totals.get(p.id, 0.0) - average_per_person for p in people}


def calculate_settlements(
    balances: Dict[str, float],
    people: Optional[List[Person]] = None
) -> List[Settlement]:
    """
    Greedy settlement: repeatedly match the largest debtor with the largest
    creditor until every balance is within one cent of zero.

    Ties go to whoever comes first in `balances` iteration order, so the
    result is deterministic for a given people order. This is not a
    minimum-transaction solver.
    """
    rounded = {pid: round_currency(v) for pid, v in balances.items()}
    settlements: List[Settlement] = []

    while True:
        max_debtor = max_creditor = None
        max_debt = max_credit = 0.0

        for pid, v in rounded.items():
            if v < -SETTLE_THRESHOLD and v < max_debt:
                max_debt = v
                max_debtor = pid
            if v > SETTLE_THRESHOLD and v > max_credit:
                max_credit = v
                max_creditor = pid

        if max_debtor is None or max_creditor is None:
            break

        amount = min(-max_debt, max_credit)
        if amount <= 0:
            break

        settlements.append(Settlement(from_id=max_debtor, to_id=max_creditor, amount=amount))
        logger.debug("settle %s -> %s: %.2f", max_debtor, max_creditor, amount)

        rounded[max_debtor] += amount
        rounded[max_creditor] -= amount

    return settlements


def compute_group_settlements(group: Group) -> List[Settlement]:
    """Settlements for a whole group; a group without expenses owes nothing"""
    if not group.expenses:
        return []
    balances = calculate_balances(group.people, group.expenses)
    return calculate_settlements(balances, group.people)


def filter_expenses_by_date(
    expenses: List[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by inclusive date range"""
    out = []
    for e in expenses:
        ed = parse_date(e.date)
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def compute_summary(
    group: Group,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> Dict[str, dict]:
    """
    Compute summary statistics for each person.
    Returns dict mapping person id -> {name, total, share, balance}
    """
    exps = filter_expenses_by_date(group.expenses, start, end)
    balances = calculate_balances(group.people, exps)
    totals = aggregate_person_totals(exps)

    return {
        p.id: {
            "name": p.name,
            "total": totals.get(p.id, 0.0),
            "share": totals.get(p.id, 0.0) - balances[p.id],
            "balance": balances[p.id],
        } for p in group.people
    }


def items_for_person(expenses: List[Expense], person_id: str) -> List[dict]:
    """A person's item lines across expenses, newest expense first"""
    lines = []
    for e in expenses:
        for item in e.items:
            if item.person_id != person_id:
                continue
            lines.append({
                "date": e.date,
                "expense": e.description,
                "description": item.description,
                "amount": item.amount,
            })
    # stable sort keeps item order within an expense
    lines.sort(key=lambda line: parse_datetime(line["date"]), reverse=True)
    return lines
