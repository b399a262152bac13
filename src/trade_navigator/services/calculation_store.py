"""
Calculation Store - saved landed-cost calculations kept in a CSV file.
"""
import csv
import threading
import uuid
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from ..engine.models import CostBreakdown, CostResult


@dataclass
class SavedCalculation:
    """A landed-cost calculation saved by a user."""
    calculation_id: str
    user_id: str
    name: str
    description: str
    materials: float
    labor: float
    overhead: float
    landed_costs: float
    total_cost: float
    per_unit_cost: Optional[float]
    quantity: Optional[float]
    currency: str
    created_at: str

    def to_csv_row(self) -> dict:
        row = asdict(self)
        return {key: '' if value is None else str(value) for key, value in row.items()}

    @classmethod
    def from_csv_row(cls, row: dict) -> 'SavedCalculation':
        return cls(
            calculation_id=row.get('calculation_id', ''),
            user_id=row.get('user_id', ''),
            name=row.get('name', ''),
            description=row.get('description', ''),
            materials=float(row.get('materials') or 0),
            labor=float(row.get('labor') or 0),
            overhead=float(row.get('overhead') or 0),
            landed_costs=float(row.get('landed_costs') or 0),
            total_cost=float(row.get('total_cost') or 0),
            per_unit_cost=float(row['per_unit_cost']) if row.get('per_unit_cost') else None,
            quantity=float(row['quantity']) if row.get('quantity') else None,
            currency=row.get('currency') or 'USD',
            created_at=row.get('created_at', ''),
        )


class CalculationStore:
    """CRUD operations for saved calculations."""

    CSV_COLUMNS = [
        'calculation_id', 'user_id', 'name', 'description', 'materials', 'labor',
        'overhead', 'landed_costs', 'total_cost', 'per_unit_cost', 'quantity',
        'currency', 'created_at',
    ]

    def __init__(self, csv_path: Path):
        self.csv_path = csv_path
        self._lock = threading.Lock()

    def save(self, costs: CostBreakdown, result: CostResult, user_id: Optional[str] = None) -> SavedCalculation:
        """Persist a calculation and return the stored record."""
        saved = SavedCalculation(
            calculation_id=f"calc-{uuid.uuid4().hex[:12]}",
            user_id=user_id or '',
            name=costs.name or 'Untitled calculation',
            description=costs.description or '',
            materials=costs.materials,
            labor=costs.labor,
            overhead=costs.overhead,
            landed_costs=costs.landed_costs,
            total_cost=result.total_cost,
            per_unit_cost=result.per_unit_cost,
            quantity=costs.quantity,
            currency=result.currency,
            created_at=result.timestamp,
        )

        with self._lock:
            calculations = self._read_all()
            calculations.append(saved)
            self._write_all(calculations)

        return saved

    def list_calculations(self, user_id: Optional[str] = None) -> list[SavedCalculation]:
        """Saved calculations, newest first."""
        with self._lock:
            calculations = self._read_all()
        if user_id is not None:
            calculations = [c for c in calculations if c.user_id == user_id]
        calculations.reverse()
        return calculations

    def get(self, calculation_id: str) -> Optional[SavedCalculation]:
        for calculation in self.list_calculations():
            if calculation.calculation_id == calculation_id:
                return calculation
        return None

    def delete(self, calculation_id: str) -> bool:
        with self._lock:
            calculations = self._read_all()
            remaining = [c for c in calculations if c.calculation_id != calculation_id]
            if len(remaining) == len(calculations):
                raise ValueError(f"Calculation '{calculation_id}' not found")
            self._write_all(remaining)
        return True

    def _read_all(self) -> list[SavedCalculation]:
        calculations = []
        if not self.csv_path.exists():
            return calculations

        with open(self.csv_path, 'r', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not row.get('calculation_id'):
                    continue
                calculations.append(SavedCalculation.from_csv_row(row))
        return calculations

    def _write_all(self, calculations: list[SavedCalculation]):
        self.csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.csv_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
            writer.writeheader()
            for calculation in calculations:
                writer.writerow(calculation.to_csv_row())
