"""Tabular export of field histograms.

Builds one DataFrame per field (key, label, count, lower, upper) and a TSV
text with one block per field, for copying into a spreadsheet.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from nicedistributions.distributions_widget.presenter import FieldHistogram

FRAME_COLUMNS = ["key", "label", "count", "lower", "upper"]


def field_to_frame(field: FieldHistogram) -> pd.DataFrame:
    """One row per bucket, in chart order. Missing edges are None."""
    rows = []
    for bucket in field.buckets:
        try:
            edges = field.edges_by_key.get(bucket.key)
        except TypeError:
            edges = None
        lower = upper = None
        if isinstance(edges, (list, tuple)) and len(edges) == 2:
            lower, upper = edges
            if isinstance(lower, dict):
                lower = lower.get("$date")
            if isinstance(upper, dict):
                upper = upper.get("$date")
        rows.append([bucket.key, bucket.label, bucket.count, lower, upper])
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def fields_to_tsv(fields: Iterable[FieldHistogram]) -> str:
    """TSV text: per field, its title line followed by the bucket table."""
    blocks = []
    for field in fields:
        df = field_to_frame(field)
        blocks.append(field.title + "\n" + df.to_csv(sep="\t", index=False, lineterminator="\n"))
    return "\n".join(blocks)
