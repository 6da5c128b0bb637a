from __future__ import annotations
from typing import Any, Dict, List, Sequence

import pandas as pd

from .capacity import BenchmarkResult

RULE = "=" * 80


def to_records(results: Sequence[BenchmarkResult]) -> List[Dict[str, Any]]:
    records = []
    for r in results:
        rec = {"name": r.name, "maxN": r.max_n, "timeMs": round(r.time_ms, 2)}
        if r.error is not None:
            rec["error"] = r.error
        records.append(rec)
    return records


def results_frame(results: Sequence[BenchmarkResult]) -> pd.DataFrame:
    rows = [{"name": r.name, "maxN": r.max_n, "timeMs": r.time_ms, "error": r.error} for r in results]
    return pd.DataFrame.from_records(rows, columns=["name", "maxN", "timeMs", "error"])


def format_table(results: Sequence[BenchmarkResult], timeout: float) -> str:
    df = results_frame(results)
    table = df.rename(columns={"name": "Algorithm", "maxN": "Max N", "timeMs": "Time (ms)"})
    if table["error"].isna().all():
        table = table.drop(columns="error")
    else:
        table["error"] = table["error"].fillna("")
    body = table.to_string(index=False, float_format=lambda v: f"{v:.2f}", justify="left")
    return "\n".join([RULE, f"SUMMARY (timeout: {timeout:g}s)", RULE, body, RULE])


def write_csv(results: Sequence[BenchmarkResult], path: str):
    results_frame(results).to_csv(path, index=False)
