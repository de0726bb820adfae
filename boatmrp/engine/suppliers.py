"""
Supplier matching for BOATMRP.

This module handles:
- Choosing a supplier for each part (preferred first, then cheapest)
- Rounding order quantities to batch size and minimum order quantity
- Dating orders back from need-by dates by lead time plus a buffer
- Splitting orders that exceed a supplier's monthly capacity

Order date for a requirement:
    order_date = need_by_date - lead_time_days - buffer_days

A capacity-limited order of Q units is split into ceil(Q / capacity)
orders, stepping back one calendar month at a time from the order date.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.dates import add_days, months_back_available, subtract_months
from boatmrp.errors import CapacitySplitError, UnmatchedSupplierWarning
from boatmrp.models.dataset import PlanningDataset
from boatmrp.models.parts import SupplierPart
from boatmrp.models.requirements import (
    OrderLine,
    PartRequirement,
    SupplierPartRequirement,
    SupplierRequirement,
)

logger = logging.getLogger(__name__)


class DatedNeed(Protocol):
    """Anything with a need-by date, a net quantity and unit ids."""

    need_by_date: date
    net_quantity: int
    unit_ids: list[str]


@dataclass
class MatchResult:
    """Result of matching part requirements to suppliers."""

    suppliers: list[SupplierRequirement]
    unmatched: list[UnmatchedSupplierWarning] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def select_supplier(links: Iterable[SupplierPart]) -> Optional[SupplierPart]:
    """Pick the preferred link, breaking ties on lowest unit price.

    Links that tie on both keep their input order.
    """
    ranked = sorted(links, key=lambda sp: (not sp.is_preferred, sp.price_per_unit))
    return ranked[0] if ranked else None


def order_quantity(
    net_quantity: int,
    link: SupplierPart,
    batch_optimization: bool = True,
) -> int:
    """Round a net quantity to the supplier's ordering terms.

    With batch optimization the quantity is rounded up to a whole number
    of batches. The result is never below the minimum order quantity.
    Applying this to its own output returns the same value as long as
    the minimum order quantity is a whole number of batches.
    """
    quantity = net_quantity
    if batch_optimization and link.batch_size > 1:
        quantity = math.ceil(quantity / link.batch_size) * link.batch_size
    return max(quantity, link.minimum_order_quantity)


def split_quantity(quantity: int, parts: int) -> list[int]:
    """Divide a quantity into near-equal parts, extra units first."""
    base, remainder = divmod(quantity, parts)
    return [base + (1 if i < remainder else 0) for i in range(parts)]


def order_lines_for(
    need: DatedNeed,
    link: SupplierPart,
    part_name: str = "",
    config: Optional[PlannerConfig] = None,
) -> list[OrderLine]:
    """Build the dated order line(s) covering one net requirement.

    Args:
        need: Net requirement (need-by date, net quantity, unit ids)
        link: Chosen supplier link
        part_name: Part name copied onto the lines
        config: Planner configuration (uses defaults if None)

    Returns:
        One line, or one per month when monthly capacity forces a split.
        Split lines are ordered from the base order date backwards.

    Raises:
        CapacitySplitError: If the split would date orders before year 1.
    """
    config = config or get_default_config()
    quantity = order_quantity(
        need.net_quantity, link, config.ordering.prefer_batch_optimization
    )
    base_date = add_days(
        need.need_by_date, -(link.lead_time_days + config.ordering.buffer_days)
    )

    capacity = link.max_monthly_capacity
    if capacity is None or quantity <= capacity:
        sizes = [quantity]
    else:
        split_count = math.ceil(quantity / capacity)
        if split_count - 1 > months_back_available(base_date):
            raise CapacitySplitError(link.part_id, split_count, capacity, base_date)
        sizes = split_quantity(quantity, split_count)
        logger.debug(
            "Splitting %d units of part %s over %d months (capacity %d)",
            quantity,
            link.part_id,
            len(sizes),
            capacity,
        )

    return [
        OrderLine(
            supplier_id=link.supplier_id,
            part_id=link.part_id,
            part_name=part_name,
            quantity=size,
            unit_price=link.price_per_unit,
            line_total=link.price_per_unit * Decimal(size),
            order_date=subtract_months(base_date, i),
            required_by_date=need.need_by_date,
            unit_ids=list(need.unit_ids),
            split_index=i,
            split_count=len(sizes),
        )
        for i, size in enumerate(sizes)
    ]


class SupplierMatcher:
    """Matches part requirements to suppliers and dates their orders.

    Parts with no supplier link are reported as unmatched and left out
    of the supplier groupings; they don't stop the calculation.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        """Initialize supplier matcher.

        Args:
            config: Planner configuration (uses defaults if None)
        """
        self.config = config or get_default_config()

    def match(
        self,
        part_requirements: Iterable[PartRequirement],
        dataset: PlanningDataset,
    ) -> MatchResult:
        """Group part requirements by their chosen supplier.

        Args:
            part_requirements: Netted part requirements
            dataset: Planning dataset holding suppliers and links

        Returns:
            MatchResult with supplier groups sorted by supplier name
        """
        groups: dict[str, SupplierRequirement] = {}
        unmatched: list[UnmatchedSupplierWarning] = []
        warnings: list[str] = []

        for requirement in part_requirements:
            link = select_supplier(dataset.links_for_part(requirement.part_id))
            if link is None:
                warning = UnmatchedSupplierWarning(
                    part_id=requirement.part_id,
                    part_number=requirement.part_number,
                    part_name=requirement.part_name,
                    net_quantity=requirement.net_quantity_needed,
                )
                logger.warning(warning.message)
                unmatched.append(warning)
                continue

            matched = self._match_part(requirement, link)
            if matched.requires_approval:
                split_months = max(line.split_count for line in matched.order_lines)
                message = (
                    f"Part {requirement.part_number or requirement.part_id} needs "
                    f"{split_months} monthly orders from supplier {link.supplier_id}, "
                    f"more than the allowed {self.config.ordering.max_capacity_split_months}"
                )
                logger.warning(message)
                warnings.append(message)

            group = groups.get(link.supplier_id)
            if group is None:
                group = self._new_group(link.supplier_id, dataset)
                groups[link.supplier_id] = group
            group.parts.append(matched)

        for group in groups.values():
            group.total_parts = len(group.parts)
            group.total_cost = sum((p.total_cost for p in group.parts), Decimal("0"))

        suppliers = sorted(groups.values(), key=lambda g: g.supplier_name)
        return MatchResult(suppliers=suppliers, unmatched=unmatched, warnings=warnings)

    def _match_part(
        self,
        requirement: PartRequirement,
        link: SupplierPart,
    ) -> SupplierPartRequirement:
        """Attach a supplier link's terms and order lines to a requirement."""
        order_lines: list[OrderLine] = []
        for dated in requirement.dated_requirements:
            order_lines.extend(
                order_lines_for(dated, link, requirement.part_name, self.config)
            )

        max_split = max((line.split_count for line in order_lines), default=1)
        data = requirement.model_dump()
        data.update(
            unit_cost=link.price_per_unit,
            total_cost=link.price_per_unit * Decimal(requirement.net_quantity_needed),
            lead_time_days=link.lead_time_days,
            batch_size=link.batch_size,
            minimum_order_quantity=link.minimum_order_quantity,
            max_monthly_capacity=link.max_monthly_capacity,
            is_preferred=link.is_preferred,
            order_lines=order_lines,
            requires_approval=max_split > self.config.ordering.max_capacity_split_months,
        )
        return SupplierPartRequirement.model_validate(data)

    def _new_group(self, supplier_id: str, dataset: PlanningDataset) -> SupplierRequirement:
        supplier = dataset.supplier(supplier_id)
        if supplier is None:
            logger.warning("Supplier %s has links but no supplier record", supplier_id)
            return SupplierRequirement(supplier_id=supplier_id, supplier_name=supplier_id)
        return SupplierRequirement(
            supplier_id=supplier.id,
            supplier_name=supplier.name,
            supplier_contact=supplier.contact_name,
            supplier_email=supplier.email,
            supplier_phone=supplier.phone,
        )
