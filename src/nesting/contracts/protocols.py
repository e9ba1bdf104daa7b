"""Service protocols for dependency injection.

Infrastructure implementations depend on these protocols, so the free
placement heuristic can be substituted without touching the search or its
memoization.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nesting.domain.value_objects import DemandPiece, PlacedPiece


@runtime_checkable
class RectanglePacker(Protocol):
    """Protocol for rotation-aware placement of pieces on one bin.

    Example:
        ```python
        class MyPacker:
            def pack(self, pieces, bin_size, spacing, border):
                ...
        ```
    """

    def pack(
        self,
        pieces: Sequence[DemandPiece],
        bin_size: tuple[float, float],
        spacing: float,
        border: float,
    ) -> list[PlacedPiece]:
        """Place as many pieces as possible on a single bin.

        Args:
            pieces: Candidate pieces, each fitting the bin in some orientation.
            bin_size: (width, length) of the bin including its border.
            spacing: Minimum gap between placed pieces.
            border: Minimum gap between pieces and the bin edge.

        Returns:
            Placements in bin coordinates for the pieces that were placed.
            Pieces that could not be placed are simply absent.
        """
        ...
