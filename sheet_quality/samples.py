"""Built-in sample datasets for trying the tool without a file of your own."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from openpyxl import Workbook

SAMPLE_SHEET_NAME = "Sheet1"

SAMPLE_DATASETS: dict[str, dict[str, Any]] = {
    "sales": {
        "name": "Sales Data",
        "headers": ["Date", "Product", "Salesperson", "Quantity", "Unit Price", "Total", "Region", "Customer"],
        "data": [
            ["2024-01-15", "Laptop Pro", "John Smith", 2, 1299.99, 2599.98, "North", "Tech Corp"],
            ["2024-01-16", "Wireless Mouse", "Sarah Johnson", 15, 29.99, 449.85, "South", "Office Solutions"],
            ["2024-01-17", "Keyboard", "Mike Davis", 8, 79.99, 639.92, "East", "StartupHub"],
            ["2024-01-18", "Monitor 27''", "Emily Brown", 3, 299.99, 899.97, "West", "Design Studio"],
            ["2024-01-19", "Laptop Pro", "John Smith", 1, 1299.99, 1299.99, "North", "University"],
            ["2024-01-20", "Tablet", "Lisa Wilson", 5, 399.99, 1999.95, "South", "Education Inc"],
            ["2024-01-21", "Wireless Mouse", "Mike Davis", 20, 29.99, 599.80, "East", "Corporate LLC"],
            ["2024-01-22", "Smartphone", "Sarah Johnson", 7, 699.99, 4899.93, "South", "Retail Chain"],
            ["2024-01-23", "Headphones", "Emily Brown", 12, 149.99, 1799.88, "West", "Music Store"],
            ["2024-01-24", "Laptop Pro", "Lisa Wilson", 4, 1299.99, 5199.96, "South", "Government"],
        ],
    },
    "inventory": {
        "name": "Inventory Management",
        "headers": ["SKU", "Product Name", "Category", "Stock Level", "Reorder Point", "Supplier", "Last Updated", "Status"],
        "data": [
            ["LT001", "Gaming Laptop", "Electronics", 45, 10, "TechSupply Co", "2024-01-20", "In Stock"],
            ["MS002", "Wireless Mouse", "Accessories", 150, 25, "PeripheralPro", "2024-01-19", "In Stock"],
            ["KB003", "Mechanical Keyboard", "Accessories", 8, 15, "KeyMaster Ltd", "2024-01-18", "Low Stock"],
            ["MN004", "4K Monitor", "Electronics", 22, 5, "DisplayTech", "2024-01-21", "In Stock"],
            ["TB005", "Tablet Pro", "Electronics", 3, 8, "MobileTech Inc", "2024-01-17", "Critical"],
            ["HP006", "Bluetooth Headphones", "Audio", 67, 20, "SoundWave Co", "2024-01-20", "In Stock"],
            ["CM007", "Webcam HD", "Accessories", 89, 30, "VisionTech", "2024-01-19", "In Stock"],
            ["SP008", "Smartphone", "Electronics", 12, 10, "PhoneCorp", "2024-01-22", "Low Stock"],
            ["CH009", "Charging Cable", "Accessories", 200, 50, "CablePro", "2024-01-18", "In Stock"],
            ["ST010", "External SSD", "Storage", 35, 15, "StorageMax", "2024-01-21", "In Stock"],
        ],
    },
    "employees": {
        "name": "Employee Records",
        "headers": ["Employee ID", "Name", "Department", "Position", "Hire Date", "Salary", "Manager", "Status"],
        "data": [
            ["EMP001", "Alice Johnson", "Engineering", "Senior Developer", "2022-03-15", 95000, "John Smith", "Active"],
            ["EMP002", "Bob Chen", "Marketing", "Marketing Manager", "2021-07-22", 78000, "Sarah Davis", "Active"],
            ["EMP003", "Carol Williams", "HR", "HR Specialist", "2023-01-10", 62000, "Mike Wilson", "Active"],
            ["EMP004", "David Brown", "Sales", "Sales Representative", "2022-11-05", 55000, "Lisa Garcia", "Active"],
            ["EMP005", "Eva Rodriguez", "Engineering", "Frontend Developer", "2023-06-18", 72000, "John Smith", "Active"],
            ["EMP006", "Frank Miller", "Finance", "Financial Analyst", "2021-09-12", 68000, "Tom Anderson", "Active"],
            ["EMP007", "Grace Kim", "Operations", "Operations Coordinator", "2022-02-28", 58000, "Amy Taylor", "Active"],
            ["EMP008", "Henry Lee", "Engineering", "DevOps Engineer", "2023-04-03", 85000, "John Smith", "Active"],
            ["EMP009", "Iris White", "Marketing", "Content Specialist", "2023-08-14", 52000, "Sarah Davis", "Active"],
            ["EMP010", "Jack Thompson", "Sales", "Senior Sales Rep", "2020-12-01", 72000, "Lisa Garcia", "Active"],
        ],
    },
}


def sample_keys() -> list[str]:
    return list(SAMPLE_DATASETS)


def _definition(key: str) -> dict[str, Any]:
    if key not in SAMPLE_DATASETS:
        raise ValueError(f"Unknown sample dataset '{key}'. Available: {sample_keys()}")
    return SAMPLE_DATASETS[key]


def sample_dataset(key: str) -> list[list[Any]]:
    definition = _definition(key)
    return [list(definition["headers"]), *(list(row) for row in definition["data"])]


def sample_filename(key: str) -> str:
    return "_".join(_definition(key)["name"].lower().split()) + "_sample.xlsx"


def write_sample_workbook(key: str, path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = SAMPLE_SHEET_NAME
    for row in sample_dataset(key):
        ws.append(row)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
