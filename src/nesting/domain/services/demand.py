"""Demand canonicalization.

Expands requested quantities into individually addressable piece instances
and produces order-independent signatures of instance subsets. Signatures
are the memoization keys of the combination search.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from nesting.domain.value_objects import (
    DemandPiece,
    DemandRequest,
    InvalidDimensionError,
    NestingMode,
)

SIGNATURE_SEPARATOR = "|"
_ESCAPE = "\\"


def normalize(width: float, length: float) -> tuple[float, float]:
    """Return (width, length) swapped so that length >= width."""
    if width > length:
        return length, width
    return width, length


def expand_demand(
    requests: Iterable[DemandRequest],
    mode: NestingMode = NestingMode.SHEET,
) -> list[DemandPiece]:
    """Expand demand requests into one DemandPiece per required copy.

    Instance ids are "<template_id>#<n>" with n counting from 1. In sheet
    mode dimensions are normalized to the canonical orientation; in length
    mode the length is the cut axis and is kept as given.

    Raises:
        InvalidDimensionError: If a template id is requested twice.
    """
    pieces: list[DemandPiece] = []
    seen: set[str] = set()
    for request in requests:
        if request.template_id in seen:
            raise InvalidDimensionError(
                f"Demand template '{request.template_id}' is listed more than once"
            )
        seen.add(request.template_id)

        if mode is NestingMode.SHEET:
            width, length = normalize(request.width, request.length)
        else:
            width, length = request.width, request.length

        for n in range(1, request.quantity + 1):
            pieces.append(
                DemandPiece(
                    id=request.template_id,
                    instance_id=f"{request.template_id}#{n}",
                    name=request.name or request.template_id,
                    width=width,
                    length=length,
                    allowed_stock_ids=request.allowed_stock_ids,
                )
            )
    return pieces


def _escape(instance_id: str) -> str:
    return instance_id.replace(_ESCAPE, _ESCAPE * 2).replace(
        SIGNATURE_SEPARATOR, _ESCAPE + SIGNATURE_SEPARATOR
    )


def signature(pieces: Iterable[DemandPiece]) -> str:
    """Order-independent key identifying exactly which instances are present.

    Separators and escapes inside instance ids are escaped, so distinct
    instance sets never share a signature.
    """
    return SIGNATURE_SEPARATOR.join(sorted(_escape(piece.instance_id) for piece in pieces))


class DemandPool:
    """Immutable backing store of piece instances addressed by handles.

    A handle is the index of an instance in the pool. Remaining demand is a
    frozenset of handles, so removing placed pieces is a set difference and
    identity comparisons are exact.
    """

    def __init__(self, pieces: Sequence[DemandPiece]) -> None:
        self._pieces = tuple(pieces)
        self._handles = {piece.instance_id: i for i, piece in enumerate(self._pieces)}
        if len(self._handles) != len(self._pieces):
            raise ValueError("Demand pool instance ids must be unique")

    def __len__(self) -> int:
        return len(self._pieces)

    def __getitem__(self, handle: int) -> DemandPiece:
        return self._pieces[handle]

    @property
    def pieces(self) -> tuple[DemandPiece, ...]:
        return self._pieces

    def all_handles(self) -> frozenset[int]:
        return frozenset(range(len(self._pieces)))

    def handle_of(self, instance_id: str) -> int:
        return self._handles[instance_id]

    def resolve(self, handles: Iterable[int]) -> list[DemandPiece]:
        """Pieces for the given handles in handle order."""
        return [self._pieces[h] for h in sorted(handles)]

    def signature(self, handles: Iterable[int]) -> str:
        return signature(self._pieces[h] for h in handles)
