"""Raw-parameter <-> arc-length conversion.

Segment chains precompute a ``ChainLengthTable`` at construction: one row
per edge (including the closing edge of a closed chain) with the edge's
endpoints, displacement, unit direction, length and the running
cumulative length.  Looking up an arc length finds the *first* edge whose
cumulative length is >= the target, so a target sitting exactly on a
shared vertex resolves to the edge that ends there.  ``torch.searchsorted``
with ``right=False`` implements exactly that rule.

Conics:
    - Circle: theta = s / radius (closed form)
    - Ellipse: no closed form; unit-speed lookups raise
      ``UnsupportedParametrizationError``
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import torch

from curve_engine.errors import DomainError, UnsupportedParametrizationError


@dataclass(frozen=True, eq=False)
class ChainLengthTable:
    """Per-edge arc-length data for a segment chain.

    Attributes
    ----------
    starts, ends : torch.Tensor
        Edge endpoints, shape (M, D).  For a closed chain the last row of
        ``ends`` is the first vertex.
    displacements : torch.Tensor
        ``ends - starts``, shape (M, D).
    directions : torch.Tensor
        Unit displacement per edge, shape (M, D).  Zero-length edges get a
        zero row.
    lengths : torch.Tensor
        Edge lengths, shape (M,).
    cumulative : torch.Tensor
        Running sum of ``lengths``, shape (M,).  Non-decreasing.
    total_length : float
        ``cumulative[-1]``.
    """

    starts: torch.Tensor
    ends: torch.Tensor
    displacements: torch.Tensor
    directions: torch.Tensor
    lengths: torch.Tensor
    cumulative: torch.Tensor
    total_length: float

    @classmethod
    def from_vertices(cls, vertices: torch.Tensor, closed: bool = False) -> "ChainLengthTable":
        """Build the table from an ``(N, D)`` vertex tensor, N >= 2."""
        starts = vertices[:-1]
        ends = vertices[1:]
        if closed:
            starts = torch.cat([starts, vertices[-1:]], dim=0)
            ends = torch.cat([ends, vertices[:1]], dim=0)

        displacements = ends - starts
        lengths = torch.linalg.norm(displacements, dim=1)
        safe = torch.where(lengths > 0, lengths, torch.ones_like(lengths))
        directions = torch.where(
            (lengths > 0).unsqueeze(-1),
            displacements / safe.unsqueeze(-1),
            torch.zeros_like(displacements),
        )
        cumulative = torch.cumsum(lengths, dim=0)

        return cls(
            starts=starts,
            ends=ends,
            displacements=displacements,
            directions=directions,
            lengths=lengths,
            cumulative=cumulative,
            total_length=float(cumulative[-1]),
        )

    @property
    def num_edges(self) -> int:
        return int(self.lengths.shape[0])

    def locate(self, arc_lengths: torch.Tensor) -> torch.Tensor:
        """Return the edge index for each arc length, shape (N,).

        Inputs are arc lengths whatever the owning chain's mode, so a
        ``DomainError`` raised here always describes the arc-length interval
        ``[0, total_length]`` (``unit_speed=True``).  Raw parameters must be
        scaled by ``total_length`` first.

        Raises
        ------
        DomainError
            If an arc length is negative or exceeds the total length.
        """
        if arc_lengths.numel() and bool((arc_lengths < 0).any()):
            bad = float(arc_lengths[arc_lengths < 0][0])
            raise DomainError(bad, "lower", 0.0, curve="SegmentChain", unit_speed=True)

        idx = torch.searchsorted(self.cumulative, arc_lengths.contiguous(), right=False)
        overflow = idx >= self.num_edges
        if bool(overflow.any()):
            bad = float(arc_lengths[overflow][0])
            raise DomainError(
                bad, "upper", self.total_length, curve="SegmentChain", unit_speed=True
            )
        return idx

    def edge_index(self, arc_length: float) -> int:
        """Scalar form of ``locate``."""
        s = torch.tensor([arc_length], dtype=self.cumulative.dtype)
        return int(self.locate(s)[0])

    def interpolate(self, arc_lengths: torch.Tensor) -> torch.Tensor:
        """Points at the given arc lengths, shape (N, D).

        Within edge ``i`` the local fraction is
        ``r = (s - cumulative[i-1]) / lengths[i]`` (``cumulative[-1] = 0``)
        and the point is ``(1 - r) * start_i + r * end_i``, so ``s = 0``
        returns the first vertex exactly.
        """
        idx = self.locate(arc_lengths)

        prev = torch.where(
            idx > 0,
            self.cumulative[(idx - 1).clamp(min=0)],
            torch.zeros_like(arc_lengths),
        )
        seg_len = self.lengths[idx]
        safe = torch.where(seg_len > 0, seg_len, torch.ones_like(seg_len))
        r = torch.where(seg_len > 0, (arc_lengths - prev) / safe, torch.zeros_like(seg_len))
        r = r.unsqueeze(-1)

        return (1.0 - r) * self.starts[idx] + r * self.ends[idx]


def arc_length_to_angle(arc_length: torch.Tensor, radius: float) -> torch.Tensor:
    """Circle: angle swept after travelling ``arc_length`` (may be negative)."""
    return arc_length / radius


def angle_to_arc_length(angle: torch.Tensor, radius: float) -> torch.Tensor:
    return angle * radius


def circumference(radius: float) -> float:
    return 2.0 * math.pi * radius


def ellipse_arc_length_to_angle(arc_length: torch.Tensor, radius_x: float, radius_y: float) -> torch.Tensor:
    """Not available: needs root finding over an incomplete elliptic integral."""
    raise UnsupportedParametrizationError(
        f"Ellipse(radius_x={radius_x}, radius_y={radius_y}) has no closed-form "
        "arc-length parametrization; unit-speed evaluation is not supported"
    )
