"""Small in-memory tidy datasets used throughout the chapters.

Every builder returns a fresh DataFrame, so callers may mutate the result.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

MONTHS: list[str] = [calendar.month_abbr[m] for m in range(1, 13)]

# Lincoln, NE daily mean temperature (°F): monthly mean and spread
_MONTHLY_TEMPS: dict[str, tuple[float, float]] = {
    "Jan": (24.0, 9.0),
    "Feb": (29.0, 9.5),
    "Mar": (40.0, 9.0),
    "Apr": (52.0, 7.5),
    "May": (62.0, 6.0),
    "Jun": (72.0, 5.0),
    "Jul": (77.0, 4.5),
    "Aug": (75.0, 4.5),
    "Sep": (66.0, 6.0),
    "Oct": (53.0, 7.5),
    "Nov": (39.0, 8.5),
    "Dec": (27.0, 9.5),
}

_MTCARS: list[tuple[str, float, int, float, int, float]] = [
    ("Mazda RX4", 21.0, 6, 160.0, 110, 2.620),
    ("Mazda RX4 Wag", 21.0, 6, 160.0, 110, 2.875),
    ("Datsun 710", 22.8, 4, 108.0, 93, 2.320),
    ("Hornet 4 Drive", 21.4, 6, 258.0, 110, 3.215),
    ("Hornet Sportabout", 18.7, 8, 360.0, 175, 3.440),
    ("Valiant", 18.1, 6, 225.0, 105, 3.460),
    ("Duster 360", 14.3, 8, 360.0, 245, 3.570),
    ("Merc 240D", 24.4, 4, 146.7, 62, 3.190),
    ("Merc 230", 22.8, 4, 140.8, 95, 3.150),
    ("Merc 280", 19.2, 6, 167.6, 123, 3.440),
    ("Merc 280C", 17.8, 6, 167.6, 123, 3.440),
    ("Merc 450SE", 16.4, 8, 275.8, 180, 4.070),
    ("Merc 450SL", 17.3, 8, 275.8, 180, 3.730),
    ("Merc 450SLC", 15.2, 8, 275.8, 180, 3.780),
    ("Cadillac Fleetwood", 10.4, 8, 472.0, 205, 5.250),
    ("Lincoln Continental", 10.4, 8, 460.0, 215, 5.424),
    ("Chrysler Imperial", 14.7, 8, 440.0, 230, 5.345),
    ("Fiat 128", 32.4, 4, 78.7, 66, 2.200),
    ("Honda Civic", 30.4, 4, 75.7, 52, 1.615),
    ("Toyota Corolla", 33.9, 4, 71.1, 65, 1.835),
    ("Toyota Corona", 21.5, 4, 120.1, 97, 2.465),
    ("Dodge Challenger", 15.5, 8, 318.0, 150, 3.520),
    ("AMC Javelin", 15.2, 8, 304.0, 150, 3.435),
    ("Camaro Z28", 13.3, 8, 350.0, 245, 3.840),
    ("Pontiac Firebird", 19.2, 8, 400.0, 175, 3.845),
    ("Fiat X1-9", 27.3, 4, 79.0, 66, 1.935),
    ("Porsche 914-2", 26.0, 4, 120.3, 91, 2.140),
    ("Lotus Europa", 30.4, 4, 95.1, 113, 1.513),
    ("Ford Pantera L", 15.8, 8, 351.0, 264, 3.170),
    ("Ferrari Dino", 19.7, 6, 145.0, 175, 2.770),
    ("Maserati Bora", 15.0, 8, 301.0, 335, 3.570),
    ("Volvo 142E", 21.4, 4, 121.0, 109, 2.780),
]


def bundestag() -> pd.DataFrame:
    """Seats per party in the German Bundestag, 2005–2009."""
    return pd.DataFrame(
        {
            "party": ["CDU/CSU", "SPD", "FDP", "Die Linke", "Grüne"],
            "seats": [226, 222, 61, 54, 51],
        }
    )


def market_share() -> pd.DataFrame:
    """Market share (%) of five companies of near-equal size over three years."""
    shares = {
        2015: [17, 18, 20, 22, 23],
        2016: [18, 19, 20, 21, 22],
        2017: [20, 20, 19, 21, 20],
    }
    rows = [
        {"year": year, "company": company, "share": share}
        for year, values in shares.items()
        for company, share in zip("ABCDE", values, strict=True)
    ]
    return pd.DataFrame(rows)


def temperatures(seed: int = 42) -> pd.DataFrame:
    """Daily mean temperatures for one (leap) year, grouped by month.

    Synthetic but deterministic for a given *seed*.
    """
    rng = np.random.default_rng(seed)
    frames = []
    for month_idx, month in enumerate(MONTHS, start=1):
        mean, spread = _MONTHLY_TEMPS[month]
        n_days = calendar.monthrange(2016, month_idx)[1]
        frames.append(
            pd.DataFrame(
                {
                    "date": pd.date_range(f"2016-{month_idx:02d}-01", periods=n_days),
                    "month": month,
                    "mean_temp": rng.normal(mean, spread, n_days).round(1),
                }
            )
        )
    df = pd.concat(frames, ignore_index=True)
    df["month"] = pd.Categorical(df["month"], categories=MONTHS, ordered=True)
    return df


def mtcars() -> pd.DataFrame:
    """Fuel economy and performance of 32 cars (Motor Trend, 1974)."""
    df = pd.DataFrame(_MTCARS, columns=["model", "mpg", "cyl", "disp", "hp", "wt"])
    df["cylinders"] = df["cyl"].map(lambda c: f"{c} cyl")
    return df


DATASETS: dict[str, Callable[[], pd.DataFrame]] = {
    "bundestag": bundestag,
    "market_share": market_share,
    "temperatures": temperatures,
    "mtcars": mtcars,
}


def list_datasets() -> list[str]:
    """Return sorted names of all built-in datasets."""
    return sorted(DATASETS)


def load_dataset(name: str) -> pd.DataFrame:
    """Return a fresh copy of the built-in dataset *name*.

    Raises
    ------
    KeyError
        When *name* is not registered.
    """
    if name not in DATASETS:
        msg = f"Unknown dataset: {name!r}. Available: {list_datasets()}"
        raise KeyError(msg)
    logger.debug("Loading built-in dataset %s", name)
    return DATASETS[name]()
