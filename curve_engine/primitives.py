"""Point and direction helpers on float64 tensors.

Points and directions are plain ``torch.Tensor`` values of shape ``(D,)``
with ``D`` in {2, 3}.  Vertex lists are ``(N, D)`` tensors.  Everything is
stored in float64 so endpoint checks can be exact.

Provides:
    - as_point(): coerce sequences / numpy arrays / tensors to a point
    - as_points(): same for an ordered vertex list
    - magnitude(), normalize()
    - require_nonzero(): reject degenerate directions at construction
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
import torch

from curve_engine.errors import PreconditionError

DTYPE = torch.float64

VectorLike = Union[torch.Tensor, np.ndarray, Sequence[float]]


def as_point(
    value: VectorLike,
    name: str = "point",
    dims: tuple[int, ...] = (2, 3),
) -> torch.Tensor:
    """Convert ``value`` to a detached float64 tensor of shape ``(D,)``.

    Parameters
    ----------
    value : VectorLike
        Coordinates as a tensor, numpy array or sequence of floats.
    name : str
        Argument name used in error messages.
    dims : tuple[int, ...]
        Accepted dimensions.

    Returns
    -------
    torch.Tensor
        New tensor; later changes to ``value`` do not affect it.

    Raises
    ------
    PreconditionError
        Wrong shape, unsupported dimension or non-finite coordinates.
    """
    try:
        p = torch.as_tensor(value, dtype=DTYPE).detach().clone()
    except (TypeError, ValueError, RuntimeError) as e:
        raise PreconditionError(f"{name} is not a numeric vector: {value!r}") from e

    if p.ndim != 1 or p.shape[0] not in dims:
        raise PreconditionError(
            f"{name} must have shape (D,) with D in {dims}, got {tuple(p.shape)}"
        )
    if not torch.isfinite(p).all():
        raise PreconditionError(f"{name} has non-finite coordinates: {p.tolist()}")
    return p


def as_points(
    values: Union[VectorLike, Sequence[VectorLike]],
    name: str = "vertices",
    dims: tuple[int, ...] = (2, 3),
) -> torch.Tensor:
    """Convert an ordered vertex list to a float64 tensor of shape ``(N, D)``."""
    if isinstance(values, (torch.Tensor, np.ndarray)):
        pts = torch.as_tensor(values, dtype=DTYPE).detach().clone()
    elif len(values) == 0:
        pts = torch.zeros((0, dims[0]), dtype=DTYPE)
    else:
        rows = [as_point(v, f"{name}[{i}]", dims) for i, v in enumerate(values)]
        if len({r.shape[0] for r in rows}) != 1:
            raise PreconditionError(f"{name} mix 2D and 3D points")
        pts = torch.stack(rows)

    if pts.ndim != 2 or pts.shape[1] not in dims:
        raise PreconditionError(
            f"{name} must have shape (N, D) with D in {dims}, got {tuple(pts.shape)}"
        )
    if not torch.isfinite(pts).all():
        raise PreconditionError(f"{name} contain non-finite coordinates")
    return pts


def magnitude(v: torch.Tensor) -> float:
    """Euclidean length of ``v`` as a Python float."""
    return float(torch.linalg.norm(v))


def normalize(v: torch.Tensor) -> torch.Tensor:
    """Return ``v / |v|``.

    Zero vectors are rejected at curve construction, so no guard here.
    """
    return v / torch.linalg.norm(v)


def require_nonzero(v: torch.Tensor, name: str = "direction") -> torch.Tensor:
    """Raise ``PreconditionError`` if ``v`` has zero length, else return it."""
    if magnitude(v) == 0.0:
        raise PreconditionError(f"{name} must be non-zero, got {v.tolist()}")
    return v
