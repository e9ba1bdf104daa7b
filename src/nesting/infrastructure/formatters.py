"""Output formatters and exporters for nesting results."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from nesting.domain import FeasibilityReport, NestingSummary, PlacedPiece, StockLayout

if TYPE_CHECKING:
    from nesting.application.dtos import NestingOutput


class SummaryFormatter:
    """Formats a nesting summary as text tables."""

    def __init__(self, include_layouts: bool = True) -> None:
        """Initialize formatter.

        Args:
            include_layouts: Whether to list the placements of every layout.
        """
        self._include_layouts = include_layouts

    def format(self, summary: NestingSummary) -> str:
        lines = [
            "STOCK USAGE",
            "=" * 70,
            f"{'Stock':<24} {'Size':<16} {'Count':<8} {'Area':>18}",
            "-" * 70,
        ]
        for usage in summary.usages:
            lines.append(
                f"{usage.name:<24} {usage.size_label:<16} {usage.count:<8} "
                f"{usage.consumed_area:>18,.1f}"
            )
        lines.append("-" * 70)
        lines.append(f"{'Consumed area:':<24} {summary.consumed_area:,.1f}")
        lines.append(f"{'Demand area:':<24} {summary.demand_area:,.1f}")
        lines.append(
            f"{'Waste:':<24} {summary.waste_area:,.1f} ({summary.waste_percentage:.1f}%)"
        )
        if summary.total_price is not None:
            lines.append(f"{'Total price:':<24} {summary.total_price:,.2f}")
        if summary.total_weight is not None:
            lines.append(f"{'Total weight:':<24} {summary.total_weight:,.2f}")

        if self._include_layouts:
            for index, layout in enumerate(summary.layouts, start=1):
                lines.append("")
                lines.extend(self._format_layout(index, layout))

        return "\n".join(lines)

    def _format_layout(self, index: int, layout: StockLayout) -> list[str]:
        utilization = layout.used_area / layout.area * 100 if layout.area else 0.0
        lines = [
            f"Layout {index}: {layout.name} ({layout.size_label}), "
            f"{layout.piece_count} pieces, {utilization:.1f}% used",
        ]
        for placed in layout.placements:
            lines.append(f"  {self._format_placement(placed)}")
        return lines

    @staticmethod
    def _format_placement(placed: PlacedPiece) -> str:
        turn = " (rotated)" if placed.rotated else ""
        return (
            f"{placed.piece.instance_id:<16} at ({placed.x:g}, {placed.y:g}) "
            f"{placed.placed_width:g}x{placed.placed_length:g}{turn}"
        )


class FeasibilityFormatter:
    """Formats a feasibility report for display."""

    def format(self, report: FeasibilityReport) -> str:
        if report.is_feasible:
            lines = ["All pieces fit at least one stock unit."]
        else:
            lines = ["Pieces that fit no stock unit:"]
            seen: set[str] = set()
            for piece in report.unusable_pieces:
                if piece.id in seen:
                    continue
                seen.add(piece.id)
                count = sum(1 for p in report.unusable_pieces if p.id == piece.id)
                lines.append(f"  {piece.name} ({piece.width:g}x{piece.length:g}) x{count}")
            if report.profile_limited_pieces:
                lines.append("")
                lines.append(
                    "Some of these would fit without the profile's border inset."
                )

        lines.append("")
        lines.append("Stock considered:")
        for summary in report.stock_summaries:
            lines.append(f"  {summary}")
        return "\n".join(lines)


class JsonResultExporter:
    """Exports a nesting output as JSON."""

    def export(self, output: NestingOutput) -> str:
        return json.dumps(self.to_dict(output), indent=2)

    def to_dict(self, output: NestingOutput) -> dict[str, Any]:
        data: dict[str, Any] = {
            "is_valid": output.is_valid,
            "failure": output.failure.value if output.failure else None,
            "errors": list(output.errors),
            "explored": output.explored,
            "budget_exhausted": output.budget_exhausted,
        }
        if output.feasibility is not None:
            data["feasibility"] = self.feasibility_to_dict(output.feasibility)
        if output.summary is not None:
            data["summary"] = self.summary_to_dict(output.summary)
        return data

    def feasibility_to_dict(self, report: FeasibilityReport) -> dict[str, Any]:
        return {
            "is_feasible": report.is_feasible,
            "unusable_pieces": [
                {
                    "template_id": piece.id,
                    "instance_id": piece.instance_id,
                    "name": piece.name,
                    "width": piece.width,
                    "length": piece.length,
                }
                for piece in report.unusable_pieces
            ],
            "profile_limited": [piece.instance_id for piece in report.profile_limited_pieces],
            "considered_stock": [stock.id for stock in report.considered_stock],
            "stock_summaries": list(report.stock_summaries),
        }

    def summary_to_dict(self, summary: NestingSummary) -> dict[str, Any]:
        return {
            "counts": {usage.stock_id: usage.count for usage in summary.usages},
            "usages": [
                {
                    "stock_id": usage.stock_id,
                    "name": usage.name,
                    "size": usage.size_label,
                    "area": usage.area,
                    "count": usage.count,
                }
                for usage in summary.usages
            ],
            "consumed_area": summary.consumed_area,
            "demand_area": summary.demand_area,
            "waste_area": summary.waste_area,
            "waste_percentage": round(summary.waste_percentage, 2),
            "total_price": summary.total_price,
            "total_weight": summary.total_weight,
            "layouts": [self._layout_to_dict(layout) for layout in summary.layouts],
        }

    def _layout_to_dict(self, layout: StockLayout) -> dict[str, Any]:
        return {
            "stock_id": layout.stock_id,
            "name": layout.name,
            "size": layout.size_label,
            "area": layout.area,
            "width": layout.width,
            "length": layout.length,
            "placements": [
                {
                    "template_id": p.piece.id,
                    "instance_id": p.piece.instance_id,
                    "x": p.x,
                    "y": p.y,
                    "width": p.placed_width,
                    "length": p.placed_length,
                    "rotated": p.rotated,
                }
                for p in layout.placements
            ],
        }
