#!/usr/bin/env python3
"""
Generates sample-data/quality_mess.xlsx with deliberate data quality problems
for trying the checker.

Run from the repo root:
    python sample-data/generate_xlsx.py

Problems baked in:
  Sheet "Contacts"
    - Empty cells: missing email (row 4), missing age (row 6)
    - Invalid emails: "bob.example.com" (row 3), "carol@mail" (row 5)
    - Negative ages: -4 (row 5), "-30" stored as text (row 8)
    - Duplicates: "Sales" department repeats, "dave@example.com" twice
    - Blank header: column E has no name (reported as "Column 5")
  Sheet "Notes"
    - Short rows: trailing cells missing
"""

from pathlib import Path
import openpyxl

OUTPUT = Path(__file__).parent / "quality_mess.xlsx"

wb = openpyxl.Workbook()

# ── Sheet 1: Contacts ────────────────────────────────────────────────────────
ws = wb.active
ws.title = "Contacts"

ws.append(["Name", "Email", "Age", "Department", None])

data = [
    # name      email                 age    department   unnamed
    ["Alice",   "alice@example.com",  34,    "Sales",     "x"],   # row 2
    ["Bob",     "bob.example.com",    29,    "Support",   "y"],   # row 3 - bad email
    ["Carol",   None,                 41,    "Sales",     "z"],   # row 4 - empty email, dup dept
    ["Dave",    "carol@mail",         -4,    "Finance",   "w"],   # row 5 - bad email, negative age
    ["Erin",    "dave@example.com",   None,  "Sales",     "v"],   # row 6 - empty age
    ["Frank",   "dave@example.com",   52,    "Support",   "u"],   # row 7 - dup email
    ["Grace",   "grace@example.org",  "-30", "Ops",       "t"],   # row 8 - negative age as text
]

for row in data:
    ws.append(row)

# ── Sheet 2: Notes (short rows) ──────────────────────────────────────────────
ws_notes = wb.create_sheet("Notes")
ws_notes.append(["Topic", "Owner", "Due"])
ws_notes.append(["Budget", "Alice"])
ws_notes.append(["Hiring"])

wb.save(OUTPUT)
print(f"Created: {OUTPUT}")
