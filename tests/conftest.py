from __future__ import annotations

import shutil
import uuid
from pathlib import Path

import pytest

from car_scenes.ingestion import Record


CARS_CSV = """Make,Fuel,EngineCylinders,AverageHighwayMPG,AverageCityMPG
Acura,Gasoline,4,35,25
BMW,Diesel,6,28,20
Tesla,Electricity,0,107,124
Chevrolet,Gasoline,8,22,15
Audi,Gasoline,4,30,22
Volkswagen,Diesel,4,37,29
"""


@pytest.fixture
def tmp_path() -> Path:
    """Repo-local temporary dirs with explicit mkdir avoid host tmp ACL issues."""
    root = Path.cwd() / ".pytest-local"
    root.mkdir(parents=True, exist_ok=True)
    path = root / f"case-{uuid.uuid4().hex}"
    path.mkdir(parents=False, exist_ok=False)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def cars_csv(tmp_path: Path) -> Path:
    path = tmp_path / "cars2017.csv"
    path.write_text(CARS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def records() -> tuple[Record, ...]:
    return (
        Record("Acura", "Gasoline", 4, 35.0, 25.0),
        Record("BMW", "Diesel", 6, 28.0, 20.0),
        Record("Tesla", "Electricity", 0, 107.0, 124.0),
        Record("Chevrolet", "Gasoline", 8, 22.0, 15.0),
        Record("Audi", "Gasoline", 4, 30.0, 22.0),
        Record("Volkswagen", "Diesel", 4, 37.0, 29.0),
    )
