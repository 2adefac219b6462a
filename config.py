"""
Configuration, serialization and record factories for SplitBill
"""
from __future__ import annotations
import json
import logging
import math
import os
import uuid
from dataclasses import dataclass, fields
from typing import Iterable, List, Optional, Tuple

from computations import InvalidArgument
from models import Expense, ExpenseItem, Group, Person
from utils import app_dir, iso_timestamp, now_iso, parse_datetime, safe_float

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """User settings stored in settings.json"""
    currency_symbol: str = "Rp"
    decimals: int = 0
    share_base_url: str = "http://localhost:3000"
    log_level: str = "INFO"


def settings_path() -> str:
    return os.path.join(app_dir(), "settings.json")


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from JSON file; a missing file gives the defaults"""
    path = path or settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return Settings()
    known = {f.name for f in fields(Settings)}
    return Settings(**{k: v for k, v in data.items() if k in known})


# ---------- Serialization ----------

def group_to_dict(group: Group) -> dict:
    """Convert Group object to dictionary for JSON serialization"""
    return {
        "id": group.id,
        "name": group.name,
        "people": [{"id": p.id, "name": p.name} for p in group.people],
        "expenses": [expense_to_dict(e) for e in group.expenses],
        "createdAt": group.created_at,
    }


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "groupId": e.group_id,
        "description": e.description,
        "date": e.date,
        "items": [
            {"personId": i.person_id, "description": i.description, "amount": i.amount}
            for i in e.items
        ],
    }


def normalize_legacy_items(d: dict) -> List[ExpenseItem]:
    """
    Items for an expense in the old paidBy/splitWith shape:
    each splitWith member gets an equal part of the amount.
    """
    split_with = list(d.get("splitWith") or [])
    if not split_with:
        return []
    part = float(d.get("amount", 0.0)) / len(split_with)
    description = d.get("description", "")
    return [ExpenseItem(person_id=pid, description=description, amount=part) for pid in split_with]


def dict_to_expense(d: dict) -> Expense:
    if "items" in d and d["items"] is not None:
        items = [
            ExpenseItem(
                person_id=i["personId"],
                description=i.get("description", ""),
                amount=float(i["amount"]),
            ) for i in d["items"]
        ]
    else:
        items = normalize_legacy_items(d)
        logger.debug("normalized legacy expense %s into %d items", d.get("id"), len(items))

    return Expense(
        id=d["id"],
        group_id=d.get("groupId", ""),
        description=d.get("description", ""),
        date=d.get("date", ""),
        items=items,
    )


def dict_to_group(d: dict) -> Group:
    """Convert dictionary from JSON to Group object"""
    return Group(
        id=d["id"],
        name=d["name"],
        people=[Person(id=p["id"], name=p.get("name", "")) for p in d.get("people", [])],
        expenses=[dict_to_expense(e) for e in d.get("expenses", [])],
        created_at=d.get("createdAt", ""),
    )


def load_group_file(path: str) -> Group:
    """Read a single group JSON document"""
    with open(path, "r", encoding="utf-8") as f:
        return dict_to_group(json.load(f))


def save_group_file(group: Group, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(group_to_dict(group), f, ensure_ascii=False, indent=2)


# ---------- Factories ----------

def new_id() -> str:
    return str(uuid.uuid4())


def new_person(name: str) -> Person:
    return Person(id=new_id(), name=name.strip())


def add_person(group: Group, name: str) -> Person:
    """Append a new member to an existing group"""
    if not name or not name.strip():
        raise InvalidArgument("person name is required")
    person = new_person(name)
    group.people.append(person)
    return person


def new_group(name: str, names: Iterable[str]) -> Group:
    """Create a group; blank person names are skipped"""
    if not name or not name.strip():
        raise InvalidArgument("group name is required")
    people = [new_person(n) for n in names if n and n.strip()]
    if not people:
        raise InvalidArgument("a group needs at least one person")
    return Group(id=new_id(), name=name.strip(), people=people, expenses=[], created_at=now_iso())


def new_expense(
    group: Group,
    description: str,
    items: Iterable[Tuple[str, str, object]],
    date: Optional[str] = None
) -> Expense:
    """
    Build a validated expense for `group` from (person_id, description, amount)
    tuples. Amounts may be given as strings, as typed into a form.
    """
    if not description or not description.strip():
        raise InvalidArgument("expense description is required")
    member_ids = {p.id for p in group.people}
    valid: List[ExpenseItem] = []
    for person_id, item_desc, raw_amount in items:
        if person_id not in member_ids:
            raise InvalidArgument(f"person {person_id!r} is not in group {group.id!r}")
        if not item_desc or not item_desc.strip():
            raise InvalidArgument(f"description for {person_id!r} is required")
        amount = safe_float(raw_amount, default=float("nan"))
        if not (math.isfinite(amount) and amount > 0):
            raise InvalidArgument(f"amount for {person_id!r} must be a positive number")
        valid.append(ExpenseItem(person_id=person_id, description=item_desc.strip(), amount=amount))

    if not valid:
        raise InvalidArgument("an expense needs at least one item")

    when = now_iso()
    if date:
        when = iso_timestamp(parse_datetime(date))

    return Expense(
        id=new_id(),
        group_id=group.id,
        description=description.strip(),
        date=when,
        items=valid,
    )
