"""Batch runner — validates exports, applies salary changes and writes HR reports."""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from people_pipeline import hr
from people_pipeline.config import PipelineConfig, load_pipeline_config
from people_pipeline.exceptions import PeopleAnalyticsError
from people_pipeline.hr.compensation import apply_raise
from people_pipeline.hr.ingest import ingest_hris_data, normalize_exports, read_hris_exports, validate_exports
from people_pipeline.hr.performance import performance_summary
from people_pipeline.hr.sample import load_sample_store
from people_pipeline.hr.store import RecordStore
from people_pipeline.utils.io import write_output

console = Console()
logger = logging.getLogger("people_pipeline")

OUTPUT_SUFFIX = {"csv": ".csv", "parquet": ".parquet", "json": ".json"}


def load_raise_batch(path: Path) -> list[dict]:
    """Read a YAML list of raises: ``- {emp_id: 2, percentage: 10, reason: merit}``."""
    with open(path) as f:
        batch = yaml.safe_load(f) or []
    match batch:
        case list():
            return batch
        case {"raises": list(items)}:
            return items
        case _:
            raise ValueError(f"Raise batch {path} must be a list of raises")


def configure_logging(config: PipelineConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def render_table(title: str, df: pd.DataFrame) -> Table:
    table = Table(title=title)
    for col in df.columns:
        table.add_column(str(col), justify="right" if pd.api.types.is_numeric_dtype(df[col]) else "left")
    for row in df.itertuples(index=False):
        table.add_row(*("" if pd.isna(v) else str(v) for v in row))
    return table


def validate_exports_command(config: PipelineConfig) -> bool:
    tables = normalize_exports(read_hris_exports(config.data_dir))
    outcomes = validate_exports(tables)

    table = Table(title="Validation Results")
    table.add_column("Check")
    table.add_column("Valid")
    table.add_column("Details")
    for name, outcome in outcomes.items():
        status = "[green]✓[/green]" if outcome["valid"] else "[red]✗[/red]"
        table.add_row(name, status, "; ".join(outcome["errors"]) or "OK")
    console.print(table)
    return all(o["valid"] for o in outcomes.values())


def apply_raises(store: RecordStore, raises: list[dict], config: PipelineConfig) -> None:
    for item in raises:
        match item:
            case {"emp_id": emp_id, "percentage": pct, "reason": reason}:
                new_salary = apply_raise(store, emp_id, pct, reason, config=config)
                console.print(f"  Employee {emp_id}: new salary [bold]{new_salary:,.2f}[/bold]")
            case other:
                raise ValueError(f"Malformed raise entry: {other}")


def write_reports(reports: hr.ReportSet, config: PipelineConfig) -> None:
    for name, df in reports.items():
        path = config.output_dir / f"{name}{OUTPUT_SUFFIX[config.output_format]}"
        write_output(df, path, config.output_format)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the people analytics pipeline")
    parser.add_argument("--env", type=str, help="Config environment (default: $PEOPLE_PIPELINE_ENV)")
    parser.add_argument("--validate", action="store_true", help="Only validate the HRIS exports")
    parser.add_argument("--sample", action="store_true", help="Use the bundled sample organisation")
    parser.add_argument("--report", choices=hr.REPORTS, help="Print a single report instead of writing all")
    parser.add_argument("--raise", dest="raise_", nargs=3, metavar=("EMP_ID", "PCT", "REASON"),
                        help="Apply one percentage raise before reporting")
    parser.add_argument("--raise-batch", type=Path, help="YAML file of raises to apply before reporting")
    parser.add_argument("--summary", nargs=3, metavar=("EMP_ID", "START", "END"),
                        help="Print one employee's review summary for a date range")
    args = parser.parse_args(argv)

    config = load_pipeline_config(args.env)
    configure_logging(config)

    try:
        if args.validate:
            return 0 if validate_exports_command(config) else 1

        store = load_sample_store() if args.sample else ingest_hris_data(config=config)

        raises = load_raise_batch(args.raise_batch) if args.raise_batch else []
        if args.raise_:
            emp_id, pct, reason = args.raise_
            raises.append({"emp_id": int(emp_id), "percentage": pct, "reason": reason})
        if raises:
            console.print(f"[bold]Applying {len(raises)} salary change(s)...[/bold]")
            apply_raises(store, raises, config)

        if args.summary:
            emp_id, start, end = args.summary
            summary = performance_summary(store, int(emp_id), start, end, config)
            console.print(render_table("Performance Summary", pd.DataFrame([summary])))
        elif args.report:
            console.print(render_table(args.report, hr.build_report(store, args.report, config)))
        else:
            console.print("[bold]Running HR pipeline...[/bold]")
            write_reports(hr.run(store, config), config)
    except (PeopleAnalyticsError, FileNotFoundError, ValueError) as exc:
        console.print(f"[red]{type(exc).__name__}: {exc}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
