"""
Excel export functionality for SplitBill
"""
from __future__ import annotations
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Group
from config import Settings
from computations import (
    calculate_expense_total,
    calculate_settlements,
    compute_summary,
    filter_expenses_by_date,
)
from utils import parse_date, parse_datetime

AMOUNT_FORMAT = "#,##0.00"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _number_format(ws, col, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        ws.cell(r, col).number_format = AMOUNT_FORMAT


def export_excel(
    group: Group,
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    settings: Optional[Settings] = None
) -> None:
    """
    Export group to Excel file with sheets:
    - Expenses: a title row per expense, its items, then a TOTAL row
    - Summary: total spent, fair share and balance per person
    - Settlements: who pays whom
    """
    settings = settings or Settings()
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    names = {p.id: p.name for p in group.people}
    exps = filter_expenses_by_date(group.expenses, start, end)

    ws = wb.create_sheet("Expenses")
    ws.append(["Item", "Person", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"

    for e in sorted(exps, key=lambda e: parse_datetime(e.date)):
        ws.append([f"{parse_date(e.date).strftime('%d.%m.%Y')} {e.description}", "", ""])
        title_row = ws.max_row
        ws.cell(title_row, 1).font = Font(bold=True)
        ws.cell(title_row, 1).fill = PatternFill("solid", fgColor="D9E1F2")

        for item in e.items:
            ws.append([item.description, names.get(item.person_id, "Unknown"), item.amount])

        last_item_row = ws.max_row
        ws.append(["TOTAL", "", None])
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        if last_item_row > title_row:
            ws.cell(trow, 3).value = f"=SUM(C{title_row + 1}:C{last_item_row})"
        else:
            ws.cell(trow, 3).value = calculate_expense_total(e)

        # blank line between expenses
        ws.append([""] * 3)

    _number_format(ws, 3)
    _autosize_columns(ws)

    # Summary sheet
    ws = wb.create_sheet("Summary")
    summary = compute_summary(group, start, end)
    ws.append(["Person", "Total Spent", "Fair Share", "Balance"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for p in group.people:
        s = summary[p.id]
        ws.append([s["name"], s["total"], s["share"], s["balance"]])
    for c in range(2, 5):
        _number_format(ws, c)
    _autosize_columns(ws)

    # Settlements sheet
    ws = wb.create_sheet("Settlements")
    ws.append(["From (Debtor)", "To (Creditor)", f"Amount ({settings.currency_symbol})"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    balances = {pid: s["balance"] for pid, s in summary.items()}
    for s in calculate_settlements(balances, group.people):
        ws.append([names.get(s.from_id, "Unknown"), names.get(s.to_id, "Unknown"), s.amount])
    _number_format(ws, 3)
    _autosize_columns(ws)

    wb.save(filepath)
