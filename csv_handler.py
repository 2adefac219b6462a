"""
CSV export and import functionality for SplitBill
"""
from __future__ import annotations
import csv
from typing import Dict, List

from models import Expense, ExpenseItem, Group

HEADER = ['expense_id', 'date', 'expense', 'person_id', 'person', 'description', 'amount']


def export_items_to_csv(group: Group, filepath: str) -> None:
    """
    Export every expense item of a group to CSV, one row per item
    CSV columns: expense_id, date, expense, person_id, person, description, amount
    """
    names = {p.id: p.name for p in group.people}
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for e in group.expenses:
            for item in e.items:
                writer.writerow([
                    e.id,
                    e.date,
                    e.description,
                    item.person_id,
                    names.get(item.person_id, "Unknown"),
                    item.description,
                    item.amount,
                ])


def import_items_from_csv(filepath: str, group_id: str) -> List[Expense]:
    """
    Import expenses from an item CSV.
    Rows sharing an expense_id are gathered into one Expense, in first-seen order.
    """
    expenses: Dict[str, Expense] = {}

    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            eid = row['expense_id']
            if eid not in expenses:
                expenses[eid] = Expense(
                    id=eid,
                    group_id=group_id,
                    description=row['expense'],
                    date=row['date'],
                    items=[],
                )
            expenses[eid].items.append(ExpenseItem(
                person_id=row['person_id'],
                description=row['description'],
                amount=float(row['amount']),
            ))

    return list(expenses.values())
