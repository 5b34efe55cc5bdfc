"""Numeric backends for differentiable functions.

A backend decides how derivative containers are represented. Function
implementations write into a staging container obtained from the backend and
the backend turns it into the public result:

- ``dense``: NumPy arrays allocated eagerly. Staging containers start filled
  with NaN, so every entry must be assigned explicitly (use
  :meth:`Backend.zero_fill` before writing the non-zero entries).
- ``sparse``: staging containers are ``scipy.sparse.dok_array`` objects
  (shape ``(n,)`` for gradients, ``(n, n)`` for Hessians) that store only the
  non-zero entries and read unassigned entries as zero. Results are
  ``scipy.sparse.csr_array`` objects.

Function values are dense vectors for both backends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence, Union

import numpy as np
from scipy import sparse

Array = np.ndarray
SparseArray = sparse.csr_array
Derivative = Union[Array, SparseArray]


class Backend(ABC):
    """
    Container strategy shared by every function instantiated over it.

    Instances are immutable and compared by identity; use the module-level
    :data:`DENSE` and :data:`SPARSE` singletons or :func:`backend`.
    """

    name: str = "backend"
    is_sparse: bool = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def make_result(self, size: int) -> Array:
        """Return an output vector of ``size`` entries, all undefined (NaN)."""
        return np.full(size, np.nan, dtype=float)

    @abstractmethod
    def make_gradient(self, size: int) -> Any:
        """Return a staging container for one gradient row of length ``size``."""

    @abstractmethod
    def make_hessian(self, size: int) -> Any:
        """Return a staging container for a ``(size, size)`` Hessian."""

    @abstractmethod
    def zero_fill(self, container: Any) -> None:
        """Set every entry of ``container`` to zero."""

    @abstractmethod
    def finish_gradient(self, container: Any, size: int) -> Derivative:
        """Turn a gradient staging container into the public result."""

    @abstractmethod
    def finish_hessian(self, container: Any, size: int) -> Derivative:
        """Turn a Hessian staging container into the public result."""

    @abstractmethod
    def stack_rows(self, rows: Sequence[Derivative], size: int) -> Derivative:
        """Stack finished gradient rows into an ``(m, size)`` Jacobian."""


class DenseBackend(Backend):
    """Fully materialized NumPy containers."""

    name = "dense"
    is_sparse = False

    def make_gradient(self, size: int) -> Array:
        return np.full(size, np.nan, dtype=float)

    def make_hessian(self, size: int) -> Array:
        return np.full((size, size), np.nan, dtype=float)

    def zero_fill(self, container: Array) -> None:
        container.fill(0.0)

    def finish_gradient(self, container: Array, size: int) -> Array:
        return container

    def finish_hessian(self, container: Array, size: int) -> Array:
        return container

    def stack_rows(self, rows: Sequence[Array], size: int) -> Array:
        if not rows:
            return np.zeros((0, size), dtype=float)
        return np.vstack(rows)


class SparseBackend(Backend):
    """Non-zero-only containers backed by ``scipy.sparse``."""

    name = "sparse"
    is_sparse = True

    def make_gradient(self, size: int) -> sparse.dok_array:
        return sparse.dok_array((size,), dtype=float)

    def make_hessian(self, size: int) -> sparse.dok_array:
        return sparse.dok_array((size, size), dtype=float)

    def zero_fill(self, container: sparse.dok_array) -> None:
        container.clear()

    def finish_gradient(self, container: sparse.dok_array, size: int) -> SparseArray:
        entries = container.tocoo()
        (cols,) = entries.coords
        rows = np.zeros_like(cols)
        return sparse.csr_array((entries.data, (rows, cols)), shape=(1, size))

    def finish_hessian(self, container: sparse.dok_array, size: int) -> SparseArray:
        return container.tocsr()

    def stack_rows(self, rows: Sequence[SparseArray], size: int) -> SparseArray:
        if not rows:
            return sparse.csr_array((0, size), dtype=float)
        return sparse.csr_array(sparse.vstack(rows, format="csr"))


DENSE = DenseBackend()
SPARSE = SparseBackend()


def backend(name: str) -> Backend:
    """
    Return the backend registered under ``name``.

    Supported names:
        - "dense": NumPy arrays, every entry materialized
        - "sparse": ``scipy.sparse`` arrays, non-zero entries only

    Raises:
        ValueError: If the backend name is not supported.
    """
    name_lower = name.lower()
    if name_lower == "dense":
        return DENSE
    elif name_lower == "sparse":
        return SPARSE
    else:
        supported = ["dense", "sparse"]
        raise ValueError(
            f"Unsupported backend name: {name!r}. Supported backends: {supported}"
        )


def default_backend() -> Backend:
    """Return the default (dense) backend."""
    return DENSE


def to_dense(value: Derivative) -> Array:
    """
    Return ``value`` as a NumPy array, densifying sparse containers.

    Sparse gradients keep their ``(1, n)`` row shape; call ``.reshape(-1)``
    to compare them with dense gradients.
    """
    if sparse.issparse(value):
        return value.toarray()
    return np.asarray(value, dtype=float)


__all__ = [
    "Backend",
    "DENSE",
    "DenseBackend",
    "Derivative",
    "SPARSE",
    "SparseBackend",
    "backend",
    "default_backend",
    "to_dense",
]
