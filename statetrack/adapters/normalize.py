from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from statetrack.errors import PlotDataError
from statetrack.series import Sample


try:
    import pandas as pd
except ImportError:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except ImportError:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_samples(data: Any) -> list[Sample]:
    """Coerce raw ``(position, state)`` input to a list of samples.

    Accepts a sequence of pairs, a 2-column numpy array or torch tensor, or a
    pandas DataFrame (``position``/``state`` columns when present, else the
    first two columns).
    Input order is preserved; sorting is the reducer's job.
    """
    if pd is not None and isinstance(data, pd.DataFrame):
        return _from_dataframe(data)

    if torch is not None and isinstance(data, torch.Tensor):
        tensor = data.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        data = tensor.numpy()

    if isinstance(data, np.ndarray):
        if data.ndim != 2 or data.shape[1] != 2:
            raise PlotDataError(f"sample array must have shape (N, 2), got {data.shape}")
        rows: Sequence[Any] = data.tolist()
    elif isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        rows = data
    else:
        raise PlotDataError(f"unsupported sample input type: {type(data)!r}")

    out: list[Sample] = []
    for i, row in enumerate(rows):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence) or len(row) != 2:
            raise PlotDataError(f"sample {i} must be a (position, state) pair: {row!r}")
        out.append(Sample(_coerce_position(row[0], index=i), row[1]))
    return out


def _from_dataframe(frame: Any) -> list[Sample]:
    if "position" in frame.columns and "state" in frame.columns:
        positions = frame["position"]
        states = frame["state"]
    elif frame.shape[1] == 2:
        positions = frame.iloc[:, 0]
        states = frame.iloc[:, 1]
    else:
        raise PlotDataError("DataFrame samples need `position`/`state` columns or exactly two columns")
    return [
        Sample(_coerce_position(pos, index=i), state)
        for i, (pos, state) in enumerate(zip(positions.tolist(), states.tolist(), strict=True))
    ]


def _coerce_position(raw: Any, *, index: int) -> float:
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, (bool, np.bool_)):
        raise PlotDataError(f"position at index {index} must be numeric, got bool")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"position at index {index} is not numeric: {raw!r}") from exc
    if not np.isfinite(value):
        raise PlotDataError(f"position at index {index} is not finite: {raw!r}")
    return value
