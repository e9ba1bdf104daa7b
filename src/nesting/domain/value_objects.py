"""Value objects for stock nesting.

All dataclasses are frozen (immutable) so that they can be shared between
search branches and used in sets and as dictionary keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Slack for coordinates that went through float arithmetic.
EPSILON = 1e-9


class NestingError(Exception):
    """Base class for nesting errors."""


class InvalidDimensionError(NestingError, ValueError):
    """Raised when a piece, stock unit or profile has an unusable dimension.

    Raised before the search starts; the search never begins with invalid
    input.
    """


class InvalidJobError(NestingError, ValueError):
    """Raised when a nesting job is inconsistent (empty catalog, duplicate ids)."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class FailureKind(str, Enum):
    """Reasons a nesting request cannot be satisfied.

    These are reported as results, not raised:
    - NO_FEASIBLE_STOCK: a demand piece fits no stock unit in any orientation
    - PACKING_EXHAUSTED: every stock option was explored without placing
      all demand
    - PROFILE_MISMATCH: a piece fits the raw stock but not the area left
      after the profile's border inset
    """

    NO_FEASIBLE_STOCK = "no_feasible_stock"
    PACKING_EXHAUSTED = "packing_exhausted"
    PROFILE_MISMATCH = "profile_mismatch"


class NestingMode(str, Enum):
    """Sheet (2-D) or length (1-D) nesting."""

    SHEET = "sheet"
    LENGTH = "length"


def _format_dimension(value: float) -> str:
    return f"{value:g}"


def _require_positive(kind: str, label: str, width: float, length: float) -> None:
    if width <= 0 or length <= 0:
        raise InvalidDimensionError(
            f"{kind} '{label}' has non-positive dimensions ({width}x{length})"
        )


@dataclass(frozen=True)
class StockUnit:
    """A purchasable raw-material unit (sheet or length).

    Attributes:
        id: Catalog identifier.
        name: Display name.
        width: Width (for lengths, the bar cross-section).
        length: Length.
        price: Optional price per unit.
        weight: Optional weight per unit.
    """

    id: str
    name: str
    width: float
    length: float
    price: float | None = None
    weight: float | None = None

    def __post_init__(self) -> None:
        _require_positive("Stock unit", self.id, self.width, self.length)
        if self.price is not None and self.price < 0:
            raise InvalidDimensionError(f"Stock unit '{self.id}' has a negative price")
        if self.weight is not None and self.weight < 0:
            raise InvalidDimensionError(f"Stock unit '{self.id}' has a negative weight")

    @property
    def area(self) -> float:
        return self.width * self.length

    @property
    def size_label(self) -> str:
        """Size as "<length>×<width>"."""
        return f"{_format_dimension(self.length)}×{_format_dimension(self.width)}"

    def usable_width(self, border: float) -> float:
        """Width left for placement inside the border inset."""
        return self.width - 2 * border

    def usable_length(self, border: float) -> float:
        """Length left for placement inside the border inset."""
        return self.length - 2 * border


@dataclass(frozen=True)
class DemandRequest:
    """A requested piece template with its quantity.

    Attributes:
        template_id: Identity of the piece template.
        width: Piece width.
        length: Piece length.
        quantity: Number of copies required (at least 1).
        name: Display name (defaults to the template id).
        allowed_stock_ids: Stock units this template may be cut from;
            None means any stock unit.
    """

    template_id: str
    width: float
    length: float
    quantity: int = 1
    name: str = ""
    allowed_stock_ids: frozenset[str] | None = None

    def __post_init__(self) -> None:
        _require_positive("Demand piece", self.template_id, self.width, self.length)
        if self.quantity < 1:
            raise InvalidDimensionError(
                f"Demand piece '{self.template_id}' quantity must be at least 1"
            )


@dataclass(frozen=True)
class DemandPiece:
    """A single placeable copy of a demand template.

    Created fresh per search invocation by expanding DemandRequest
    quantities. For sheet nesting the dimensions are canonical
    (length >= width).
    """

    id: str
    instance_id: str
    name: str
    width: float
    length: float
    allowed_stock_ids: frozenset[str] | None = None

    def __post_init__(self) -> None:
        _require_positive("Demand piece", self.instance_id, self.width, self.length)

    @property
    def area(self) -> float:
        return self.width * self.length

    def allows(self, stock: StockUnit) -> bool:
        """Whether this piece may be cut from the given stock unit."""
        return self.allowed_stock_ids is None or stock.id in self.allowed_stock_ids


@dataclass(frozen=True)
class PackingProfile:
    """Cutting machine configuration.

    Attributes:
        margin_gap: Minimum spacing between placed pieces (saw kerf).
        border_inset: Minimum spacing from the stock edge.
        straight_cuts_only: Force the deterministic shelf packer so that
            every layout can be cut with edge-to-edge guillotine cuts.
    """

    margin_gap: float = 0.0
    border_inset: float = 0.0
    straight_cuts_only: bool = False

    def __post_init__(self) -> None:
        if self.margin_gap < 0:
            raise InvalidDimensionError("Margin gap must be non-negative")
        if self.border_inset < 0:
            raise InvalidDimensionError("Border inset must be non-negative")


@dataclass(frozen=True)
class PlacedPiece:
    """A demand piece placed at a position on a stock unit.

    Coordinates are measured from the stock origin (border included).

    Attributes:
        piece: The placed demand piece instance.
        x: Position along the stock width.
        y: Position along the stock length.
        placed_width: Extent along the stock width.
        placed_length: Extent along the stock length.
        rotated: True if the piece was turned 90 degrees from its
            canonical orientation.
    """

    piece: DemandPiece
    x: float
    y: float
    placed_width: float
    placed_length: float
    rotated: bool = False

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def right_edge(self) -> float:
        return self.x + self.placed_width

    @property
    def top_edge(self) -> float:
        return self.y + self.placed_length

    def overlaps(self, other: PlacedPiece) -> bool:
        """Check whether the bounding boxes share interior area."""
        return not (
            self.right_edge <= other.x + EPSILON
            or other.right_edge <= self.x + EPSILON
            or self.top_edge <= other.y + EPSILON
            or other.top_edge <= self.y + EPSILON
        )


@dataclass(frozen=True)
class StockLayout:
    """Placement of pieces on a single stock unit."""

    stock_id: str
    name: str
    size_label: str
    area: float
    width: float
    length: float
    placements: tuple[PlacedPiece, ...] = ()

    @classmethod
    def for_stock(
        cls, stock: StockUnit, placements: tuple[PlacedPiece, ...] = ()
    ) -> StockLayout:
        return cls(
            stock_id=stock.id,
            name=stock.name,
            size_label=stock.size_label,
            area=stock.area,
            width=stock.width,
            length=stock.length,
            placements=placements,
        )

    @property
    def used_area(self) -> float:
        """Area covered by placed pieces."""
        return sum(p.placed_width * p.placed_length for p in self.placements)

    @property
    def piece_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class SearchResult:
    """Best stock combination found by the search.

    Attributes:
        total_area: Consumed stock area.
        counts: Stock id -> number of units consumed.
        layouts: One layout per consumed unit, in search order.
    """

    total_area: float
    counts: dict[str, int] = field(default_factory=dict)
    layouts: tuple[StockLayout, ...] = ()

    @property
    def total_units(self) -> int:
        return sum(self.counts.values())
