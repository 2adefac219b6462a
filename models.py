"""
Data models for SplitBill
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass
class Person:
    """Group member; identity is the id, name is display-only"""
    id: str
    name: str


@dataclass
class ExpenseItem:
    """One person's individually attributed cost within an expense"""
    person_id: str
    description: str
    amount: float


@dataclass
class Expense:
    """Expense record made of per-person items"""
    id: str
    group_id: str
    description: str
    date: str  # ISO-8601 timestamp
    items: List[ExpenseItem] = field(default_factory=list)


@dataclass
class Group:
    """A group owns its people and expenses"""
    id: str
    name: str
    people: List[Person] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    created_at: str = ""


@dataclass
class Settlement:
    """Transfer from a debtor to a creditor"""
    from_id: str
    to_id: str
    amount: float
