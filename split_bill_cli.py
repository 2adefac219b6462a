"""
SplitBill command line
- Record itemized group expenses in a JSON file, see who spent what,
  and compute who pays whom to even out the group.
- Export an Excel or CSV report, or a compressed share link.

Run:
  splitbill summary group.json
  splitbill settle group.json

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import List, Optional

from computations import (
    InvalidArgument,
    compute_group_settlements,
    compute_summary,
    items_for_person,
)
from config import (
    Settings,
    add_person,
    load_group_file,
    load_settings,
    new_expense,
    new_group,
    save_group_file,
)
from csv_handler import export_items_to_csv, import_items_from_csv
from excel_export import export_excel
from models import Group
from share_link import build_share_url, load_shared_group
from storage import delete_group, get_group, load_groups, save_group
from utils import format_currency, parse_date

logger = logging.getLogger(__name__)


def _money(settings: Settings, amount: float) -> str:
    return format_currency(amount, settings.currency_symbol, settings.decimals)


def _name(group: Group, person_id: str) -> str:
    for p in group.people:
        if p.id == person_id:
            return p.name
    return "Unknown"


def cmd_new(args, settings: Settings) -> int:
    group = new_group(args.name, args.people)
    save_group_file(group, args.out)
    for p in group.people:
        print(f"{p.id}  {p.name}")
    return 0


def cmd_add_person(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    person = add_person(group, args.name)
    save_group_file(group, args.file)
    print(f"{person.id}  {person.name}")
    return 0


def _parse_item(raw: str):
    """PERSON_ID=DESCRIPTION=AMOUNT"""
    parts = raw.split("=")
    if len(parts) != 3:
        raise InvalidArgument(f"item {raw!r} is not PERSON_ID=DESCRIPTION=AMOUNT")
    return parts[0], parts[1], parts[2]


def cmd_add_expense(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    expense = new_expense(group, args.description, [_parse_item(s) for s in args.items], args.date)
    group.expenses.append(expense)
    save_group_file(group, args.file)
    logger.info("added expense %s with %d items", expense.id, len(expense.items))
    return 0


def cmd_summary(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    summary = compute_summary(group)
    print(f"{group.name}: {len(group.people)} people, {len(group.expenses)} expenses")
    for s in summary.values():
        print(f"  {s['name']:<20} spent {_money(settings, s['total']):>16}"
              f"  balance {_money(settings, s['balance']):>16}")
    return 0


def cmd_settle(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    settlements = compute_group_settlements(group)
    if not settlements:
        print("No payments needed")
        return 0
    for s in settlements:
        print(f"{_name(group, s.from_id)} pays {_name(group, s.to_id)} {_money(settings, s.amount)}")
    return 0


def cmd_person(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    lines = items_for_person(group.expenses, args.person_id)
    print(_name(group, args.person_id))
    if not lines:
        print("  No expenses yet")
        return 0
    for line in lines:
        print(f"  {parse_date(line['date']).isoformat()}  {line['expense']} / {line['description']}"
              f"  {_money(settings, line['amount'])}")
    print(f"  Total {_money(settings, sum(line['amount'] for line in lines))}")
    return 0


def cmd_export_excel(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    start = parse_date(args.start) if args.start else None
    end = parse_date(args.end) if args.end else None
    export_excel(group, args.out, start, end, settings)
    logger.info("wrote %s", args.out)
    return 0


def cmd_export_csv(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    export_items_to_csv(group, args.out)
    logger.info("wrote %s", args.out)
    return 0


def cmd_import_csv(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    imported = import_items_from_csv(args.csv, group.id)
    group.expenses.extend(imported)
    save_group_file(group, args.file)
    logger.info("imported %d expenses from %s", len(imported), args.csv)
    return 0


def cmd_share(args, settings: Settings) -> int:
    group = load_group_file(args.file)
    print(build_share_url(group, args.base_url or settings.share_base_url))
    return 0


def cmd_open_share(args, settings: Settings) -> int:
    group = load_shared_group(args.data)
    if args.save:
        save_group(group)
        logger.info("saved group %s", group.id)
    print(f"{group.name}: {len(group.people)} people, {len(group.expenses)} expenses")
    for s in compute_group_settlements(group):
        print(f"{_name(group, s.from_id)} pays {_name(group, s.to_id)} {_money(settings, s.amount)}")
    return 0


def cmd_groups(args, settings: Settings) -> int:
    groups = load_groups()
    if not groups:
        print("No groups yet")
        return 0
    for g in groups:
        print(f"{g.id}  {g.name}  ({len(g.people)} people, {len(g.expenses)} expenses)")
    return 0


def cmd_delete_group(args, settings: Settings) -> int:
    if get_group(args.group_id) is None:
        raise InvalidArgument(f"no stored group {args.group_id!r}")
    delete_group(args.group_id)
    logger.info("deleted group %s", args.group_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="splitbill", description="Split group expenses")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--settings", help="path to settings.json")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="create a group file")
    p.add_argument("name")
    p.add_argument("people", nargs="+")
    p.add_argument("--out", required=True)
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("add-person", help="add a member to a group file")
    p.add_argument("file")
    p.add_argument("name")
    p.set_defaults(func=cmd_add_person)

    p = sub.add_parser("add-expense", help="append an itemized expense")
    p.add_argument("file")
    p.add_argument("description")
    p.add_argument("items", nargs="+", metavar="PERSON_ID=DESCRIPTION=AMOUNT")
    p.add_argument("--date", help="YYYY-MM-DD, default now")
    p.set_defaults(func=cmd_add_expense)

    p = sub.add_parser("summary", help="per-person totals and balances")
    p.add_argument("file")
    p.set_defaults(func=cmd_summary)

    p = sub.add_parser("settle", help="who pays whom")
    p.add_argument("file")
    p.set_defaults(func=cmd_settle)

    p = sub.add_parser("person", help="one person's expense items")
    p.add_argument("file")
    p.add_argument("person_id")
    p.set_defaults(func=cmd_person)

    p = sub.add_parser("export-excel", help="write an Excel report")
    p.add_argument("file")
    p.add_argument("out")
    p.add_argument("--start", help="YYYY-MM-DD")
    p.add_argument("--end", help="YYYY-MM-DD")
    p.set_defaults(func=cmd_export_excel)

    p = sub.add_parser("export-csv", help="write expense items as CSV")
    p.add_argument("file")
    p.add_argument("out")
    p.set_defaults(func=cmd_export_csv)

    p = sub.add_parser("import-csv", help="append expenses from an item CSV")
    p.add_argument("file")
    p.add_argument("csv")
    p.set_defaults(func=cmd_import_csv)

    p = sub.add_parser("share", help="print a share link")
    p.add_argument("file")
    p.add_argument("--base-url")
    p.set_defaults(func=cmd_share)

    p = sub.add_parser("open-share", help="read a share link payload")
    p.add_argument("data")
    p.add_argument("--save", action="store_true", help="add the group to the local store")
    p.set_defaults(func=cmd_open_share)

    p = sub.add_parser("groups", help="list stored groups")
    p.set_defaults(func=cmd_groups)

    p = sub.add_parser("delete-group", help="remove a group from the local store")
    p.add_argument("group_id")
    p.set_defaults(func=cmd_delete_group)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    settings = load_settings(args.settings)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else str(settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args, settings)
    except InvalidArgument as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (OSError, json.JSONDecodeError, KeyError) as exc:
        print(f"error: cannot read input: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
