# ccperf/stats/tally.py
from __future__ import annotations

import copy
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ccperf.utils.errors import NotFoundError


def _as_matrix(values, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 2:
        raise ValueError(f"[{name}] expected a 2-D matrix, got shape {arr.shape}")
    return arr


class TallyMatrix:
    """
    TallyMatrix

    One tally per (row, column) cell: count, mean, sample variance
    (Welford), min, max, and optionally the raw observation sequence.

    The shape is fixed by the constructor or by the first add().
    """

    def __init__(
        self,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
        *,
        keep_observations: bool = False,
        name: str = "",
    ):
        self.name = name
        self.keep_observations = keep_observations
        self._shape: Optional[Tuple[int, int]] = None
        if rows is not None:
            self._allocate((rows, columns if columns is not None else 1))

    # ---------------------------------------------------------------
    def _allocate(self, shape: Tuple[int, int]) -> None:
        self._shape = shape
        self._n = np.zeros(shape, dtype=int)
        self._mean = np.zeros(shape)
        self._m2 = np.zeros(shape)
        self._min = np.full(shape, np.inf)
        self._max = np.full(shape, -np.inf)
        self._obs: Optional[List[List[List[float]]]] = (
            [[[] for _ in range(shape[1])] for _ in range(shape[0])]
            if self.keep_observations
            else None
        )

    @property
    def shape(self) -> Optional[Tuple[int, int]]:
        return self._shape

    @property
    def rows(self) -> int:
        return self._shape[0] if self._shape else 0

    @property
    def columns(self) -> int:
        return self._shape[1] if self._shape else 0

    def init(self) -> None:
        """Forget every observation, keep the shape."""
        if self._shape is not None:
            self._allocate(self._shape)

    # ---------------------------------------------------------------
    def add(self, values) -> None:
        x = _as_matrix(values, "TallyMatrix")
        if self._shape is None:
            self._allocate(x.shape)
        elif x.shape != self._shape:
            raise ValueError(
                f"[TallyMatrix] {self.name}: observation shape {x.shape} "
                f"does not match {self._shape}"
            )

        self._n += 1
        delta = x - self._mean
        self._mean += delta / self._n
        self._m2 += delta * (x - self._mean)
        self._min = np.minimum(self._min, x)
        self._max = np.maximum(self._max, x)

        if self._obs is not None:
            for r in range(x.shape[0]):
                for c in range(x.shape[1]):
                    self._obs[r][c].append(float(x[r, c]))

    def add_cell(self, row: int, column: int, value: float) -> None:
        n = self._n[row, column] + 1
        self._n[row, column] = n
        delta = value - self._mean[row, column]
        self._mean[row, column] += delta / n
        self._m2[row, column] += delta * (value - self._mean[row, column])
        self._min[row, column] = min(self._min[row, column], value)
        self._max[row, column] = max(self._max[row, column], value)
        if self._obs is not None:
            self._obs[row][column].append(float(value))

    # ---------------------------------------------------------------
    def counts(self) -> np.ndarray:
        return self._n.copy()

    def average(self) -> np.ndarray:
        return np.where(self._n > 0, self._mean, np.nan)

    def variance(self) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.where(self._n >= 2, self._m2 / (self._n - 1), np.nan)

    def min(self) -> np.ndarray:
        return np.where(self._n > 0, self._min, np.nan)

    def max(self) -> np.ndarray:
        return np.where(self._n > 0, self._max, np.nan)

    @property
    def has_observations(self) -> bool:
        return self._obs is not None

    def observations(self, row: int, column: int) -> List[float]:
        if self._obs is None:
            raise NotFoundError(f"[TallyMatrix] {self.name}: observations are not kept")
        return list(self._obs[row][column])

    def copy(self) -> "TallyMatrix":
        return copy.deepcopy(self)

    @classmethod
    def from_observations(
        cls, obs: Sequence[Sequence[Sequence[float]]], *, name: str = ""
    ) -> "TallyMatrix":
        """Rebuild a tally keeping observations; cells may differ in length."""
        rows = len(obs)
        columns = len(obs[0]) if rows else 0
        tally = cls(rows, columns, keep_observations=True, name=name)
        for r in range(rows):
            for c in range(columns):
                for v in obs[r][c]:
                    tally.add_cell(r, c, float(v))
        return tally


class RatioTallyMatrix:
    """
    RatioTallyMatrix

    Function of two means per cell: fed with (numerator, denominator)
    matrices, estimates mean(X) / mean(Y).

    Contract:
      - average(): ratio of means; zero_over_zero where both means are 0
      - variance(): delta method, (s_xx - 2 v s_xy + v^2 s_yy) / mean(Y)^2
      - min()/max(): extremes of the per-observation ratios
      - no raw observations
    """

    def __init__(
        self,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
        *,
        zero_over_zero: float = 0.0,
        name: str = "",
    ):
        self.name = name
        self.zero_over_zero = zero_over_zero
        self._shape: Optional[Tuple[int, int]] = None
        if rows is not None:
            self._allocate((rows, columns if columns is not None else 1))

    def _allocate(self, shape: Tuple[int, int]) -> None:
        self._shape = shape
        self._n = 0
        self._mx = np.zeros(shape)
        self._my = np.zeros(shape)
        self._cxx = np.zeros(shape)
        self._cyy = np.zeros(shape)
        self._cxy = np.zeros(shape)
        self._min = np.full(shape, np.inf)
        self._max = np.full(shape, -np.inf)

    @property
    def shape(self) -> Optional[Tuple[int, int]]:
        return self._shape

    def init(self) -> None:
        if self._shape is not None:
            self._allocate(self._shape)

    def _ratio(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            v = x / y
        return np.where((x == 0) & (y == 0), self.zero_over_zero, v)

    def add(self, numerator, denominator) -> None:
        x = _as_matrix(numerator, "RatioTallyMatrix")
        y = _as_matrix(denominator, "RatioTallyMatrix")
        if x.shape != y.shape:
            raise ValueError(
                f"[RatioTallyMatrix] {self.name}: numerator {x.shape} vs denominator {y.shape}"
            )
        if self._shape is None:
            self._allocate(x.shape)
        elif x.shape != self._shape:
            raise ValueError(
                f"[RatioTallyMatrix] {self.name}: observation shape {x.shape} "
                f"does not match {self._shape}"
            )

        self._n += 1
        dx = x - self._mx
        dy = y - self._my
        self._mx += dx / self._n
        self._my += dy / self._n
        self._cxx += dx * (x - self._mx)
        self._cyy += dy * (y - self._my)
        self._cxy += dx * (y - self._my)

        r = self._ratio(x, y)
        self._min = np.minimum(self._min, r)
        self._max = np.maximum(self._max, r)

    def counts(self) -> np.ndarray:
        return np.full(self._shape, self._n, dtype=int)

    def average(self) -> np.ndarray:
        if self._n == 0:
            return np.full(self._shape, np.nan)
        return self._ratio(self._mx, self._my)

    def variance(self) -> np.ndarray:
        if self._n < 2:
            return np.full(self._shape, np.nan)
        n1 = self._n - 1
        sxx, syy, sxy = self._cxx / n1, self._cyy / n1, self._cxy / n1
        v = self.average()
        with np.errstate(divide="ignore", invalid="ignore"):
            var = (sxx - 2.0 * v * sxy + v * v * syy) / (self._my * self._my)
        degenerate = (self._mx == 0) & (self._my == 0) & (sxx == 0) & (syy == 0)
        return np.where(degenerate, 0.0, var)

    def min(self) -> np.ndarray:
        return np.where(self._n > 0, self._min, np.nan)

    def max(self) -> np.ndarray:
        return np.where(self._n > 0, self._max, np.nan)

    def copy(self) -> "RatioTallyMatrix":
        return copy.deepcopy(self)
