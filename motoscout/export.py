"""
Export utilities for search results.
"""
from typing import List

import pandas as pd

from .models import ListingRecord
from .utils import parse_mileage_km

EXPORT_COLUMNS = [
    "title", "brand", "model", "year", "mileage", "mileage_km", "price",
    "price_value", "price_currency", "location", "image", "source", "link",
]


def records_to_frame(records: List[ListingRecord]) -> pd.DataFrame:
    """One row per listing, with parsed price and mileage columns."""
    rows = []
    for x in records:
        rows.append({
            "title": x.title,
            "brand": x.brand,
            "model": x.model,
            "year": x.year,
            "mileage": x.mileage,
            "mileage_km": parse_mileage_km(x.mileage),
            "price": x.price,
            "price_value": x.price_value,
            "price_currency": x.price_currency,
            "location": x.location,
            "image": x.image,
            "source": x.source.value,
            "link": x.link,
        })
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def save_output_rows(records: List[ListingRecord], out_path: str, logger=None):
    """Save listings to CSV or Excel file."""
    df = records_to_frame(records)
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)

    if logger:
        logger.info(f">>> Saved {len(df)} rows to {out_path}")
    else:
        print(f">>> Saved {len(df)} rows to {out_path}")
    return df
