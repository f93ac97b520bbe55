from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
from numbers import Real
from pathlib import Path
from typing import Any

import numpy as np

from .config import DEFAULT_TIMELINE_COLUMN_ID
from .errors import MalformedDatasetError
from .state import ChartState, Series, ViewportDimensions


def load_dataset(path: str | Path) -> dict[str, Any]:
    dataset_path = Path(path)
    if not dataset_path.exists():
        raise FileNotFoundError(f"dataset not found: {dataset_path}")
    try:
        raw = json.loads(dataset_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MalformedDatasetError(f"dataset is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise MalformedDatasetError("dataset must be a JSON object")
    return raw


def build_initial_state(
    dataset: Mapping[str, Any],
    viewport: ViewportDimensions,
    *,
    timeline_id: str = DEFAULT_TIMELINE_COLUMN_ID,
) -> ChartState:
    if not isinstance(dataset, Mapping):
        raise MalformedDatasetError("dataset must be a mapping")
    columns = dataset.get("columns")
    if not isinstance(columns, Sequence) or isinstance(columns, (str, bytes)):
        raise MalformedDatasetError("dataset `columns` must be a sequence of columns")
    colors = _require_mapping(dataset, "colors")
    names = _require_mapping(dataset, "names")

    timeline: np.ndarray | None = None
    charts: list[Series] = []
    seen: set[str] = set()
    for column in columns:
        column_id, values = _split_column(column)
        if column_id == timeline_id:
            if timeline is not None:
                raise MalformedDatasetError(f"duplicate timeline column `{timeline_id}`")
            timeline = values
            continue
        if column_id in seen:
            raise MalformedDatasetError(f"duplicate series id `{column_id}`")
        seen.add(column_id)
        if column_id not in colors:
            raise MalformedDatasetError(f"missing color for series `{column_id}`")
        if column_id not in names:
            raise MalformedDatasetError(f"missing name for series `{column_id}`")
        charts.append(
            Series(
                id=column_id,
                name=str(names[column_id]),
                color=str(colors[column_id]),
                values=values,
            )
        )

    if timeline is None:
        raise MalformedDatasetError(f"dataset has no timeline column `{timeline_id}`")
    if timeline.size == 0:
        raise MalformedDatasetError("timeline column is empty")
    for series in charts:
        if series.values.size != timeline.size:
            raise MalformedDatasetError(
                f"series `{series.id}` length mismatch: {series.values.size} != {timeline.size}"
            )

    return ChartState(
        timeline=timeline,
        charts=tuple(charts),
        visible_chart_ids=tuple(series.id for series in charts),
        visible_range=(0, int(timeline.size) - 1),
        viewport=viewport,
    )


def _require_mapping(dataset: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = dataset.get(key)
    if not isinstance(value, Mapping):
        raise MalformedDatasetError(f"dataset `{key}` must be a mapping")
    return value


def _split_column(column: object) -> tuple[str, np.ndarray]:
    if not isinstance(column, Sequence) or isinstance(column, (str, bytes)) or len(column) == 0:
        raise MalformedDatasetError("each column must be a non-empty sequence")
    column_id = column[0]
    if not isinstance(column_id, str) or not column_id:
        raise MalformedDatasetError("column id must be a non-empty string")
    raw_values = list(column[1:])
    for value in raw_values:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise MalformedDatasetError(f"column `{column_id}` contains non-numeric value: {value!r}")
    values = np.asarray(raw_values, dtype=np.float64)
    values.flags.writeable = False
    return column_id, values
