import json
import logging

from config import group_to_dict
from share_link import build_share_url
from split_bill_cli import main
from storage import load_groups, save_group


def _write_group(tmp_path, group):
    path = tmp_path / "group.json"
    path.write_text(json.dumps(group_to_dict(group)), encoding="utf-8")
    return str(path)


def test_settle(tmp_path, group, capsys):
    assert main(["settle", _write_group(tmp_path, group)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "Budi pays Ani Rp 35.000",
        "Citra pays Ani Rp 20.000",
    ]


def test_settle_without_expenses(tmp_path, group, capsys):
    group.expenses = []
    assert main(["settle", _write_group(tmp_path, group)]) == 0
    assert "No payments needed" in capsys.readouterr().out


def test_summary(tmp_path, group, capsys):
    assert main(["summary", _write_group(tmp_path, group)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Bali trip: 3 people, 2 expenses")
    assert "Rp 55.000" in out


def test_person(tmp_path, group, capsys):
    assert main(["person", _write_group(tmp_path, group), "a"]) == 0
    out = capsys.readouterr().out
    assert "Dinner / Dinner a" in out
    assert "Total Rp 120.000" in out


def test_empty_group_is_reported(tmp_path, group, capsys):
    group.people = []
    assert main(["summary", _write_group(tmp_path, group)]) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["settle", str(tmp_path / "missing.json")]) == 2
    assert "cannot read input" in capsys.readouterr().err


def test_exports(tmp_path, group):
    path = _write_group(tmp_path, group)
    assert main(["export-excel", path, str(tmp_path / "r.xlsx")]) == 0
    assert main(["export-csv", path, str(tmp_path / "r.csv")]) == 0
    assert (tmp_path / "r.xlsx").exists()
    assert (tmp_path / "r.csv").exists()


def test_share_and_open(tmp_path, group, capsys):
    assert main(["share", _write_group(tmp_path, group), "--base-url", "https://s.example"]) == 0
    url = capsys.readouterr().out.strip()
    assert url == build_share_url(group, "https://s.example")

    assert main(["open-share", url.split("data=", 1)[1], "--save"]) == 0
    assert "Budi pays Ani" in capsys.readouterr().out
    assert [g.id for g in load_groups()] == ["g1"]


def test_open_share_rejects_garbage(capsys):
    assert main(["open-share", "garbage"]) == 2


def test_new_then_add_expense(tmp_path, capsys):
    path = str(tmp_path / "trip.json")
    assert main(["new", "Trip", "Ani", "Budi", "--out", path]) == 0
    ids = [line.split()[0] for line in capsys.readouterr().out.splitlines()]
    assert len(ids) == 2

    assert main(["add-expense", path, "Dinner", f"{ids[0]}=Soto=60000", "--date", "2024-05-01"]) == 0
    assert main(["settle", path]) == 0
    assert capsys.readouterr().out.splitlines() == ["Budi pays Ani Rp 30.000"]


def test_add_expense_rejects_bad_item(tmp_path, group, capsys):
    path = _write_group(tmp_path, group)
    assert main(["add-expense", path, "Dinner", "a=Soto"]) == 2
    assert main(["add-expense", path, "Dinner", "a=Soto=-1"]) == 2
    assert "error:" in capsys.readouterr().err


def test_add_person(tmp_path, group, capsys):
    path = _write_group(tmp_path, group)
    assert main(["add-person", path, "Dewi"]) == 0
    new_id = capsys.readouterr().out.split()[0]
    assert main(["person", path, new_id]) == 0
    assert capsys.readouterr().out.splitlines() == ["Dewi", "  No expenses yet"]


def test_add_person_rejects_blank_name(tmp_path, group, capsys):
    assert main(["add-person", _write_group(tmp_path, group), "  "]) == 2
    assert "name is required" in capsys.readouterr().err


def test_import_csv_appends_expenses(tmp_path, group, capsys):
    source = _write_group(tmp_path, group)
    assert main(["export-csv", source, str(tmp_path / "items.csv")]) == 0

    group.expenses = []
    target = tmp_path / "target.json"
    target.write_text(json.dumps(group_to_dict(group)), encoding="utf-8")
    assert main(["import-csv", str(target), str(tmp_path / "items.csv")]) == 0

    assert main(["settle", str(target)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "Budi pays Ani Rp 35.000",
        "Citra pays Ani Rp 20.000",
    ]


def test_groups_and_delete_group(group, capsys):
    assert main(["groups"]) == 0
    assert "No groups yet" in capsys.readouterr().out

    save_group(group)
    assert main(["groups"]) == 0
    assert capsys.readouterr().out.strip() == "g1  Bali trip  (3 people, 2 expenses)"

    assert main(["delete-group", "g1"]) == 0
    assert load_groups() == []
    assert main(["delete-group", "g1"]) == 2


def test_lowercase_log_level_from_settings(tmp_path, group, monkeypatch):
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"log_level": "info"}), encoding="utf-8")
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))
    assert main(["--settings", str(settings), "settle", _write_group(tmp_path, group)]) == 0
    assert seen["level"] == "INFO"
    assert logging.getLevelName(seen["level"]) == logging.INFO
