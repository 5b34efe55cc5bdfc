"""
Mathematical functions with analytic derivatives.

A function maps an input vector of size ``n`` to an output vector of size
``m``. Concrete functions subclass one of the capability levels below and
implement the ``impl_*`` hooks:

- :class:`Function`: ``impl_compute``
- :class:`DifferentiableFunction`: ``impl_compute``, ``impl_gradient``
- :class:`TwiceDifferentiableFunction`: additionally ``impl_hessian``

The public methods validate their arguments, allocate containers through the
function's :class:`~nlpbench.core.backend.Backend` and hand them to the hooks.
Hooks write entries in place::

    class Square(DifferentiableFunction):
        def __init__(self, backend=None):
            super().__init__(1, 1, "x²", backend=backend)

        def impl_compute(self, result, x):
            result[0] = x[0] ** 2

        def impl_gradient(self, grad, x, function_id):
            grad[0] = 2.0 * x[0]
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from .backend import Array, Backend, Derivative, default_backend


def _check_size(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{label} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{label} must be positive, got {value}")
    return int(value)


class Function(ABC):
    """
    Base class for vector-valued functions ``R^n -> R^m``.

    Attributes:
        input_size: Dimension ``n`` of the argument.
        output_size: Dimension ``m`` of the result.
        name: Human-readable description, e.g. the closed-form expression.
        backend: Container strategy used for derivatives.
    """

    def __init__(
        self,
        input_size: int,
        output_size: int = 1,
        name: str = "",
        backend: Optional[Backend] = None,
    ) -> None:
        self._input_size = _check_size(input_size, "input_size")
        self._output_size = _check_size(output_size, "output_size")
        self._name = str(name)
        self._backend = backend if backend is not None else default_backend()

    @property
    def input_size(self) -> int:
        return self._input_size

    @property
    def output_size(self) -> int:
        return self._output_size

    @property
    def name(self) -> str:
        return self._name

    @property
    def backend(self) -> Backend:
        return self._backend

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(input_size={self.input_size}, "
            f"output_size={self.output_size}, name={self.name!r}, "
            f"backend={self.backend.name!r})"
        )

    def __str__(self) -> str:
        label = self.name or type(self).__name__
        return f"{label} (R^{self.input_size} -> R^{self.output_size})"

    def check_argument(self, x: Any) -> Array:
        """
        Return ``x`` as a 1-D float array of length ``input_size``.

        Raises:
            ValueError: If ``x`` is not one-dimensional or has the wrong length.
        """
        arr = np.asarray(x, dtype=float)
        if arr.ndim != 1:
            raise ValueError(
                f"{type(self).__name__} expects a 1-D argument, got shape {arr.shape}"
            )
        if arr.shape[0] != self.input_size:
            raise ValueError(
                f"{type(self).__name__} expects an argument of size "
                f"{self.input_size}, got {arr.shape[0]}"
            )
        return arr

    def check_function_id(self, function_id: int) -> int:
        """
        Validate an output row index.

        Raises:
            IndexError: If ``function_id`` is not an integer or lies outside
                ``[0, output_size)``.
        """
        if isinstance(function_id, bool) or not isinstance(function_id, (int, np.integer)):
            raise IndexError(f"function_id must be an integer, got {function_id!r}")
        if not 0 <= function_id < self.output_size:
            raise IndexError(
                f"function_id {function_id} out of range for "
                f"{type(self).__name__} with {self.output_size} outputs"
            )
        return int(function_id)

    def value(self, x: Any) -> Array:
        """Evaluate the function at ``x`` and return a new output vector."""
        arr = self.check_argument(x)
        result = self.backend.make_result(self.output_size)
        self.impl_compute(result, arr)
        return result

    def __call__(self, x: Any) -> Array:
        return self.value(x)

    @abstractmethod
    def impl_compute(self, result: Array, x: Array) -> None:
        """Write ``f(x)`` into ``result`` (length ``output_size``)."""


class DifferentiableFunction(Function):
    """Function exposing analytic first derivatives."""

    def gradient(self, x: Any, function_id: int = 0) -> Derivative:
        """
        Return the gradient of output row ``function_id`` at ``x``.

        Dense backends return an array of shape ``(n,)``; sparse backends a
        ``csr_array`` of shape ``(1, n)``.
        """
        arr = self.check_argument(x)
        row = self.check_function_id(function_id)
        grad = self.backend.make_gradient(self.input_size)
        self.impl_gradient(grad, arr, row)
        return self.backend.finish_gradient(grad, self.input_size)

    def jacobian(self, x: Any) -> Derivative:
        """Return the ``(m, n)`` matrix whose rows are the output gradients."""
        arr = self.check_argument(x)
        rows = [self.gradient(arr, i) for i in range(self.output_size)]
        return self.backend.stack_rows(rows, self.input_size)

    @abstractmethod
    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        """Write the partial derivatives of row ``function_id`` into ``grad``."""


class TwiceDifferentiableFunction(DifferentiableFunction):
    """Differentiable function also exposing analytic second derivatives."""

    def hessian(self, x: Any, function_id: int = 0) -> Derivative:
        """Return the ``(n, n)`` Hessian of output row ``function_id`` at ``x``."""
        arr = self.check_argument(x)
        row = self.check_function_id(function_id)
        hess = self.backend.make_hessian(self.input_size)
        self.impl_hessian(hess, arr, row)
        return self.backend.finish_hessian(hess, self.input_size)

    @abstractmethod
    def impl_hessian(self, hess: Any, x: Array, function_id: int) -> None:
        """Write the second derivatives of row ``function_id`` into ``hess``."""


def has_hessian(function: Function) -> bool:
    """Return True if ``function`` provides analytic Hessians."""
    return isinstance(function, TwiceDifferentiableFunction)


__all__ = [
    "DifferentiableFunction",
    "Function",
    "TwiceDifferentiableFunction",
    "has_hessian",
]
