import pytest

from models import Expense, ExpenseItem, Group, Person


def make_expense(eid, items, date="2024-05-01T10:00:00.000Z", description="Dinner"):
    """items: list of (person_id, amount)"""
    return Expense(
        id=eid,
        group_id="g1",
        description=description,
        date=date,
        items=[ExpenseItem(person_id=pid, description=f"{description} {pid}", amount=amt)
               for pid, amt in items],
    )


@pytest.fixture
def people():
    return [Person("a", "Ani"), Person("b", "Budi"), Person("c", "Citra")]


@pytest.fixture
def group(people):
    return Group(
        id="g1",
        name="Bali trip",
        people=people,
        expenses=[
            make_expense("e1", [("a", 120000.0), ("b", 30000.0)], date="2024-05-01T10:00:00.000Z",
                         description="Dinner"),
            make_expense("e2", [("c", 45000.0)], date="2024-05-03T08:30:00.000Z",
                         description="Taxi"),
        ],
        created_at="2024-04-30T12:00:00.000Z",
    )


@pytest.fixture(autouse=True)
def splitbill_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv("SPLITBILL_HOME", str(home))
    return home
