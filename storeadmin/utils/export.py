"""
Export utility.

Writes a computed review view to CSV, with a JSON metadata sidecar describing
the filters that produced it.
"""

import json
import logging
import os
from datetime import datetime
from typing import Sequence

import pandas as pd

from storeadmin.models.filter_state import FilterState
from storeadmin.models.review import Review

logger = logging.getLogger(__name__)

COLUMNS = ["id", "fecha", "puntaje", "producto", "usuario", "nombre", "detalle"]


def reviews_to_frame(reviews: Sequence[Review]) -> pd.DataFrame:
    """Tabulate reviews in display order."""
    rows = [r.to_dict() for r in reviews]
    if not rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(rows, columns=COLUMNS)


def export_reviews_csv(
    reviews: Sequence[Review],
    state: FilterState,
    total_count: int,
    output_dir: str,
    name: str = "reviews"
) -> str:
    """
    Save reviews to CSV plus a metadata JSON file.

    Args:
        reviews: Filtered and sorted reviews, in display order
        state: Filter state that produced them
        total_count: Size of the unfiltered collection
        output_dir: Directory to write into (created if missing)
        name: Base file name

    Returns:
        Path to the CSV file
    """
    df = reviews_to_frame(reviews)

    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, f"{name}.csv")
    df.to_csv(output_path, index=False)

    metadata_path = os.path.join(output_dir, f"{name}_metadata.json")
    metadata = {
        "query": state.query,
        "date_bucket": state.date_bucket.value,
        "sort_order": state.sort_order.value,
        "exported_count": len(df),
        "total_count": total_count,
        "rating_distribution": {
            str(k): int(v) for k, v in df["puntaje"].value_counts().sort_index().items()
        },
        "generated_at": datetime.now().isoformat()
    }
    with open(metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)

    logger.info(f"Exported {len(df)} of {total_count} reviews to {output_path}")
    return output_path
