from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

REQUIRED_COLUMNS = {"year", "age"}
SUPPLY_COLUMNS = ["income", "pension", "debtInjection", "savingMaturity", "savingsWithdrawal"]
DEMAND_COLUMNS = ["expense", "savings", "pensionContribution", "debtInterest", "debtPrincipal"]


def _prepare(rows: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(list(rows or []))
    if df.empty:
        return df
    missing = REQUIRED_COLUMNS.difference(df.columns)
    if missing:
        raise KeyError(f"Missing required columns: {', '.join(sorted(missing))}")
    for column in SUPPLY_COLUMNS + DEMAND_COLUMNS:
        if column not in df.columns:
            df[column] = 0.0
    return df.sort_values("year").reset_index(drop=True)


def slice_by_age(rows: Iterable[Mapping[str, Any]], start_age: int | None = None, end_age: int | None = None) -> List[Dict[str, Any]]:
    """Rows whose age falls in [start_age, end_age]; either bound may be open."""
    df = _prepare(rows)
    if df.empty:
        return []
    mask = pd.Series(True, index=df.index)
    if start_age is not None:
        mask &= df["age"] >= start_age
    if end_age is not None:
        mask &= df["age"] <= end_age
    return df[mask].to_dict(orient="records")


def lifetime_totals(rows: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    """Sum every supply and demand column across the projection."""
    df = _prepare(rows)
    if df.empty:
        return {"supply": 0.0, "demand": 0.0, "balance": 0.0, "supplyItems": {}, "demandItems": {}}
    supply_items = {column: float(df[column].fillna(0).sum()) for column in SUPPLY_COLUMNS}
    demand_items = {column: float(df[column].fillna(0).sum()) for column in DEMAND_COLUMNS}
    supply = sum(supply_items.values())
    demand = sum(demand_items.values())
    return {
        "supply": supply,
        "demand": demand,
        "balance": supply - demand,
        "supplyItems": supply_items,
        "demandItems": demand_items,
    }
