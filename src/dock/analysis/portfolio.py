from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from dock.domain.metrics import DealMetrics
from dock.domain.property import PropertySnapshot

Item = Tuple[PropertySnapshot, DealMetrics]

# sort option -> DataFrame column
SORT_COLUMNS: Dict[str, str] = {
    "score": "overall_score",
    "cap_rate": "cap_rate",
    "yield": "cash_on_cash",
    "price": "asking_price",
    "location": "city",
}


@dataclass
class PortfolioSummary:
    """
    Aggregated stats across a list of analysed properties.

    This is the 'reduction' result of running calculate_metrics per property.
    """
    n_properties: int
    total_asking_value: float
    mean_cap_rate: float
    mean_cash_on_cash: float
    p50_cash_on_cash: float
    mean_dscr: float
    p50_dscr: float
    mean_overall_score: float
    recommendation_counts: Dict[str, int] = field(default_factory=dict)


def to_frame(items: Iterable[Item]) -> pd.DataFrame:
    rows = []
    for snapshot, metrics in items:
        econ = metrics.deal_economics
        rows.append(
            {
                "address": snapshot.full_address,
                "city": snapshot.city,
                "asking_price": snapshot.asking_price,
                "cap_rate": econ.in_place_cap_rate,
                "cash_on_cash": econ.cash_on_cash_return,
                "dscr": econ.dscr,
                "annual_cash_flow": econ.annual_cash_flow,
                "overall_score": metrics.overall_score,
                "recommendation": metrics.recommendation.value,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "address",
            "city",
            "asking_price",
            "cap_rate",
            "cash_on_cash",
            "dscr",
            "annual_cash_flow",
            "overall_score",
            "recommendation",
        ],
    )


def rank_properties(
    items: Iterable[Item],
    sort_by: str = "score",
    ascending: bool = False,
) -> pd.DataFrame:
    """
    One row per property, sorted by score, cap_rate, yield (cash-on-cash),
    price or location (city). Ties keep input order.
    """
    if sort_by not in SORT_COLUMNS:
        raise ValueError(f"unknown sort_by: {sort_by!r} (expected one of {sorted(SORT_COLUMNS)})")

    df = to_frame(items)
    logger.info("Ranking properties", n_properties=len(df), sort_by=sort_by, ascending=ascending)
    return df.sort_values(SORT_COLUMNS[sort_by], ascending=ascending, kind="stable").reset_index(drop=True)


def summarize_portfolio(items: Iterable[Item]) -> PortfolioSummary:
    df = to_frame(items)
    n = int(len(df))

    if n == 0:
        # Degenerate case: empty portfolio.
        return PortfolioSummary(
            n_properties=0,
            total_asking_value=0.0,
            mean_cap_rate=float("nan"),
            mean_cash_on_cash=float("nan"),
            p50_cash_on_cash=float("nan"),
            mean_dscr=float("nan"),
            p50_dscr=float("nan"),
            mean_overall_score=float("nan"),
        )

    coc = df["cash_on_cash"].to_numpy(dtype=float)
    dscr = df["dscr"].to_numpy(dtype=float)

    summary = PortfolioSummary(
        n_properties=n,
        total_asking_value=float(df["asking_price"].sum()),
        mean_cap_rate=float(np.mean(df["cap_rate"].to_numpy(dtype=float))),
        mean_cash_on_cash=float(np.mean(coc)),
        p50_cash_on_cash=float(np.quantile(coc, 0.50)),
        mean_dscr=float(np.mean(dscr)),
        p50_dscr=float(np.quantile(dscr, 0.50)),
        mean_overall_score=float(np.mean(df["overall_score"].to_numpy(dtype=float))),
        recommendation_counts=dict(Counter(df["recommendation"])),
    )
    logger.info(
        "Portfolio summarized",
        n_properties=n,
        total_asking_value=summary.total_asking_value,
        mean_cap_rate=summary.mean_cap_rate,
    )
    return summary
