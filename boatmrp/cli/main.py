"""
BOATMRP Command-Line Interface.

Runs requirements calculations and PO batch scheduling against a planning
dataset file, printing results as tables.
"""

import logging
import sys
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from boatmrp import __version__
from boatmrp.config.schema import PlannerConfig, get_default_config
from boatmrp.engine.planner import RequirementsPlanner
from boatmrp.errors import PlanningError
from boatmrp.io import load_dataset, save_result
from boatmrp.models.orders import BatchSchedule, POBatch, ScheduleStrategy
from boatmrp.models.requirements import RequirementsAnalysis
from boatmrp.models.shortages import ShortageReport

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


def _money(value: Decimal) -> str:
    return f"${value.quantize(Decimal('0.01')):,}"


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="BOATMRP")
@click.option("--verbose", "-v", is_flag=True, help="Show engine log messages")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Planner configuration file (.json or .yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str]) -> None:
    """
    BOATMRP - Material Requirements Planning for Boat Manufacturing

    Nets production demand against stock and schedules purchase orders.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = (
            PlannerConfig.from_file(config_path) if config_path else get_default_config()
        )
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        sys.exit(1)


def _calculate(
    ctx: click.Context,
    dataset_path: str,
    safety_stock: Optional[float],
    start: Optional[datetime],
    end: Optional[datetime],
    batch_optimization: Optional[bool] = None,
) -> tuple[RequirementsPlanner, RequirementsAnalysis]:
    """Load a dataset and run a calculation, exiting on planning errors."""
    config: PlannerConfig = ctx.obj["config"]
    try:
        dataset = load_dataset(dataset_path)
        planner = RequirementsPlanner(dataset, config)
        analysis = planner.calculate(
            safety_stock_percentage=safety_stock,
            start_date=_as_date(start),
            end_date=_as_date(end),
            prefer_batch_optimization=batch_optimization,
        )
    except PlanningError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    return planner, analysis


def _save(result, output: str, label: str) -> None:
    try:
        path = save_result(result, output)
    except PlanningError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    console.print(f"[green]{label} written to {path}[/green]")


def _range_options(f):
    """Shared options for the commands that run a calculation."""
    f = click.option(
        "--end", type=click.DateTime(formats=DATE_FORMATS), default=None,
        help="Latest unit due date to include",
    )(f)
    f = click.option(
        "--start", type=click.DateTime(formats=DATE_FORMATS), default=None,
        help="Earliest unit due date to include",
    )(f)
    f = click.option(
        "--safety-stock", "-s", type=click.FloatRange(0, 100), default=None,
        help="Safety stock percentage (overrides config)",
    )(f)
    return f


# =============================================================================
# Planning Commands
# =============================================================================


@cli.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False))
@_range_options
@click.option(
    "--batch-optimization/--no-batch-optimization",
    default=None,
    help="Round order quantities up to supplier batch size (overrides config)",
)
@click.option("--output", "-o", type=click.Path(), help="Write the analysis as JSON")
@click.pass_context
def calculate(
    ctx: click.Context,
    dataset: str,
    safety_stock: Optional[float],
    start: Optional[datetime],
    end: Optional[datetime],
    batch_optimization: Optional[bool],
    output: Optional[str],
) -> None:
    """Calculate part requirements for a planning dataset."""
    _, analysis = _calculate(ctx, dataset, safety_stock, start, end, batch_optimization)
    _display_analysis(analysis)

    if output:
        _save(analysis, output, "Analysis")


@cli.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False))
@click.argument("supplier_id")
@_range_options
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in ScheduleStrategy if s != ScheduleStrategy.CUSTOM]),
    default=ScheduleStrategy.SINGLE.value,
    help="Batch scheduling strategy",
)
@click.option("--batches", "-b", type=click.IntRange(min=1), default=None, help="Batch count")
@click.option("--check", is_flag=True, help="Exit non-zero if the schedule can't be committed")
@click.option("--output", "-o", type=click.Path(), help="Write the schedule result as JSON")
@click.pass_context
def schedule(
    ctx: click.Context,
    dataset: str,
    supplier_id: str,
    safety_stock: Optional[float],
    start: Optional[datetime],
    end: Optional[datetime],
    strategy: str,
    batches: Optional[int],
    check: bool,
    output: Optional[str],
) -> None:
    """Propose PO batches for one supplier and check them for shortages.

    SUPPLIER_ID is the supplier to schedule.
    """
    planner, analysis = _calculate(ctx, dataset, safety_stock, start, end)
    requirement = analysis.supplier(supplier_id)
    if requirement is None:
        console.print(f"[red]Supplier {supplier_id} has no requirements in this range[/red]")
        sys.exit(1)

    result = planner.schedule_and_validate(requirement, strategy, batch_count=batches)
    _display_schedule(result.schedule)
    _display_shortages(result.shortages)

    if output:
        _save(result, output, "Schedule")

    if check:
        try:
            planner.ensure_committable(result)
        except PlanningError as e:
            console.print(f"[red]Not committable: {e}[/red]")
            sys.exit(1)
        console.print("[green]Schedule can be committed[/green]")


@cli.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False))
@_range_options
@click.pass_context
def monthly(
    ctx: click.Context,
    dataset: str,
    safety_stock: Optional[float],
    start: Optional[datetime],
    end: Optional[datetime],
) -> None:
    """Show draft POs grouped by supplier and order month."""
    planner, analysis = _calculate(ctx, dataset, safety_stock, start, end)
    drafts = planner.monthly_batches(analysis)
    names = {s.supplier_id: s.supplier_name for s in analysis.suppliers}

    if not drafts:
        console.print("[yellow]No purchase orders needed.[/yellow]")
        return

    table = Table(title="Monthly Draft Purchase Orders", box=None)
    table.add_column("Supplier")
    table.add_column("Month")
    table.add_column("Required By")
    table.add_column("Lines", justify="right")
    table.add_column("Units", justify="right")
    table.add_column("Total", justify="right")

    for draft in drafts:
        table.add_row(
            names.get(draft.supplier_id, draft.supplier_id),
            draft.order_date.strftime("%Y-%m"),
            str(draft.required_by_date),
            str(len(draft.lines)),
            f"{sum(line.quantity for line in draft.lines):,}",
            _money(draft.total_cost),
        )

    console.print(table)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the planner configuration in effect."""
    config: PlannerConfig = ctx.obj["config"]
    intervals = ", ".join(
        f"{name} {days}d" for name, days in config.scheduling.interval_days.items()
    )
    console.print(Panel.fit(
        f"[bold blue]BOATMRP[/bold blue] {__version__}\n\n"
        f"[bold cyan]Demand:[/bold cyan] statuses {', '.join(config.demand.active_statuses)}; "
        f"inactive boat types {'included' if config.demand.include_inactive_boat_types else 'excluded'}\n"
        f"[bold cyan]Netting:[/bold cyan] safety stock {config.netting.safety_stock_percentage:g}%\n"
        f"[bold cyan]Ordering:[/bold cyan] buffer {config.ordering.buffer_days} days; "
        f"batch optimization {'on' if config.ordering.prefer_batch_optimization else 'off'}; "
        f"approval above {config.ordering.max_capacity_split_months} split months\n"
        f"[bold cyan]Scheduling:[/bold cyan] {intervals}; "
        f"{config.scheduling.default_batch_count} batches by default",
        border_style="blue",
    ))


# =============================================================================
# Display Functions
# =============================================================================


def _display_analysis(analysis: RequirementsAnalysis) -> None:
    """Display a requirements analysis."""
    console.print()
    console.print(Panel.fit(
        f"[bold]Requirements {analysis.planning_horizon_start} to "
        f"{analysis.planning_horizon_end}[/bold]\n"
        f"{analysis.total_units} unit(s) | {analysis.total_parts} part(s) | "
        f"{analysis.total_suppliers} supplier(s) | Total {_money(analysis.total_cost)}",
        border_style="blue",
    ))

    table = Table(title="Part Requirements", box=None)
    table.add_column("Part")
    table.add_column("Name")
    table.add_column("Needed", justify="right")
    table.add_column("Stock", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Earliest Need")

    for part in analysis.parts:
        table.add_row(
            part.part_number or part.part_id,
            part.part_name,
            f"{part.total_quantity_needed:,}",
            f"{part.current_stock:,}",
            f"{part.net_quantity_needed:,}",
            str(part.earliest_need_date),
        )
    console.print(table)

    for supplier in analysis.suppliers:
        console.print()
        table = Table(title=f"{supplier.supplier_name} ({_money(supplier.total_cost)})", box=None)
        table.add_column("Part")
        table.add_column("Net", justify="right")
        table.add_column("Order Date")
        table.add_column("Qty", justify="right")
        table.add_column("Lead", justify="right")
        table.add_column("Total", justify="right")

        for part in supplier.parts:
            flag = " [red]*[/red]" if part.requires_approval else ""
            for i, line in enumerate(part.order_lines):
                table.add_row(
                    (part.part_number or part.part_id) + flag if i == 0 else "",
                    f"{part.net_quantity_needed:,}" if i == 0 else "",
                    str(line.order_date),
                    f"{line.quantity:,}",
                    f"{part.lead_time_days}d",
                    _money(line.line_total),
                )
        console.print(table)

    for warning in analysis.unmatched:
        console.print(f"[yellow]{warning.message}[/yellow]")
    for message in analysis.warnings:
        console.print(f"[yellow]{message}[/yellow]")


def _display_schedule(schedule: BatchSchedule) -> None:
    """Display a batch schedule and its allocation summary."""
    console.print()
    table = Table(title=f"Batches ({schedule.strategy.value})", box=None)
    table.add_column("#", justify="right")
    table.add_column("Order Date")
    table.add_column("Delivery")
    table.add_column("Units", justify="right")
    table.add_column("Total", justify="right")

    for batch in schedule.batches:
        table.add_row(
            str(batch.batch_number),
            str(batch.order_date),
            str(batch.expected_delivery_date),
            f"{_batch_units(batch):,}",
            _money(batch.total_cost),
        )
    console.print(table)

    console.print()
    table = Table(title="Allocation", box=None)
    table.add_column("Part")
    table.add_column("Required", justify="right")
    table.add_column("Allocated", justify="right")
    table.add_column("Status")

    colors = {"under": "yellow", "over": "yellow", "exact": "green"}
    for part in schedule.allocation.parts:
        color = colors[part.status.value]
        table.add_row(
            part.part_number or part.part_id,
            f"{part.required:,}",
            f"{part.allocated:,}",
            f"[{color}]{part.status.value}[/{color}]",
        )
    console.print(table)


def _display_shortages(report: ShortageReport) -> None:
    console.print()
    if not report.has_shortage:
        console.print("[green]No projected shortages[/green]")
        return

    table = Table(title="Projected Shortages", box=None)
    table.add_column("Date")
    table.add_column("Part")
    table.add_column("Stock", justify="right")

    for shortage in report.shortages:
        table.add_row(
            str(shortage.event_date),
            shortage.part_number or shortage.part_id,
            f"[red]{shortage.resulting_stock:,}[/red]",
        )
    console.print(table)


def _batch_units(batch: POBatch) -> int:
    return sum(line.quantity for line in batch.lines)


# =============================================================================
# Entry Point
# =============================================================================


if __name__ == "__main__":
    cli()
