from __future__ import annotations

import json
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from situpcounter.analysis.repetition_counter import RepetitionCounter
from situpcounter.config import CounterConfig, build_counter_config
from situpcounter.errors import InvalidConfigurationError, SampleFormatError
from situpcounter.io.sample_reader import iter_metrics, iter_samples

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="SitUpCounter CLI: count sit-up repetitions from landmark streams.",
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("situpcounter")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_config(rest_threshold: float | None, hysteresis: float | None) -> CounterConfig:
    try:
        return build_counter_config(rest_threshold=rest_threshold, hysteresis=hysteresis)
    except InvalidConfigurationError as exc:
        option = (exc.field or "rest_threshold").replace("_", "-")
        raise typer.BadParameter(str(exc), param_hint=f"--{option}") from exc


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Log phase transitions and completed repetitions to stderr.",
    ),
) -> None:
    _configure_logging(verbose)


@app.command("count")
def count(
    source: typer.FileText = typer.Argument(
        "-",
        help="Landmark file, one frame per line ('-' reads stdin).",
    ),
    metric: bool = typer.Option(
        False,
        "--metric",
        help="Lines hold one precomputed hip-shoulder metric instead of four coordinates.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Emit one JSON object per processed line.",
    ),
    rest_threshold: Optional[float] = typer.Option(
        None,
        "--rest-threshold",
        help="Metric value separating lying from sitting posture (default 0.15).",
    ),
    hysteresis: Optional[float] = typer.Option(
        None,
        "--hysteresis",
        help="Dead zone around the rest threshold (default 0.05).",
    ),
) -> None:
    config = _resolve_config(rest_threshold, hysteresis)
    counter = RepetitionCounter(config)
    records = iter_metrics(source) if metric else iter_samples(source)

    try:
        for record in records:
            if metric:
                counter.process_metric(record.metric)
            else:
                counter.process(record.sample)
            snapshot = counter.snapshot()
            if as_json:
                typer.echo(json.dumps({"line": record.line_no, **snapshot.as_dict()}))
            else:
                typer.echo(f"{record.line_no} {snapshot.phase.value} {snapshot.count}")
    except SampleFormatError as exc:
        err_console.print(f"[bold red]Malformed input[/bold red]: {exc}", highlight=False)
        raise typer.Exit(code=2) from exc

    logger.info("Finished with %d repetitions", counter.get_count())


@app.command("config")
def show_config(
    rest_threshold: Optional[float] = typer.Option(
        None,
        "--rest-threshold",
        help="Metric value separating lying from sitting posture.",
    ),
    hysteresis: Optional[float] = typer.Option(
        None,
        "--hysteresis",
        help="Dead zone around the rest threshold.",
    ),
) -> None:
    config = _resolve_config(rest_threshold, hysteresis)
    table = Table(title="Counter configuration")
    table.add_column("Parameter")
    table.add_column("Value", justify="right")
    for key, value in config.as_summary().items():
        table.add_row(key, f"{value:.4f}")
    console.print(table)
