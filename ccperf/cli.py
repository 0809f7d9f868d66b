#!filepath: ccperf/cli.py
from typing import Optional

import typer
from rich import print
from rich.markup import escape

from ccperf import __version__
from ccperf.compare.comparator import ResultComparator
from ccperf.config.app_config import AppConfig
from ccperf.config.compare_config import CompareConfig
from ccperf.measures.catalog import MeasureType
from ccperf.results.io import load_results
from ccperf.results.sim_results import SimResults
from ccperf.stats.confidence import check_level
from ccperf.utils.errors import InvalidStateError, NotFoundError, UserInputError
from ccperf.utils.logger import init_logging

app = typer.Typer(help="Contact-center performance measure tools")

STATISTICALLY_IDENTICAL = "All confidence intervals overlap: results seem statistically identical"
IDENTICAL = "Results are identical"


def _compare_config(config: Optional[str]) -> CompareConfig:
    if config is None:
        return CompareConfig()
    cfg = AppConfig.load(config)
    init_logging(cfg.log)
    return cfg.compare


def _fail(e: Exception) -> None:
    print(f"[red]{escape(str(e))}[/red]")
    raise typer.Exit(code=2)


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def compare(
    file1: str,
    file2: str,
    level: Optional[float] = typer.Argument(None, help="Confidence level in (0, 1)"),
    slack: Optional[float] = typer.Option(None, help="Gap tolerated between two intervals"),
    tolerance: Optional[float] = typer.Option(None, help="Maximal absolute difference of two averages"),
    config: Optional[str] = typer.Option(None, help="YAML configuration file"),
):
    """
    Compare two results files.

    Two simulation results are compared through their confidence
    intervals, anything else through their averages.
    """
    try:
        cfg = _compare_config(config)
        if level is not None:
            check_level(level)
        r1 = load_results(file1)
        r2 = load_results(file2)
    except (UserInputError, InvalidStateError, FileNotFoundError, ValueError) as e:
        _fail(e)

    level = cfg.confidence_level if level is None else level
    slack = cfg.slack if slack is None else slack
    tolerance = cfg.tolerance if tolerance is None else tolerance

    comparator = ResultComparator(cfg)
    statistical = isinstance(r1, SimResults) and isinstance(r2, SimResults) and tolerance is None
    if statistical:
        print(f"[blue]Comparing {file1} and {file2} at confidence level {level}[/blue]")
        same = comparator.equals_statistically(r1, r2, level, slack)
    else:
        print(f"[blue]Comparing averages of {file1} and {file2}[/blue]")
        same = comparator.equals_with_tolerance(r1, r2, tolerance)

    for msg in comparator.messages:
        print(f"[yellow]{escape(msg)}[/yellow]")

    if same:
        print(f"[green]{STATISTICALLY_IDENTICAL if statistical else IDENTICAL}[/green]")
        return

    print(escape(comparator.report))
    raise typer.Exit(code=1)


@app.command()
def show(
    file: str,
    measure: Optional[str] = typer.Option(None, help="Only this performance measure"),
):
    """
    Print the contents of a results file.
    """
    try:
        results = load_results(file)
        if measure is not None:
            results.report_config = results.report_config.model_copy(
                update={"printed_stats": [MeasureType.lookup(measure).name]}
            )
    except (UserInputError, InvalidStateError, NotFoundError, ValueError) as e:
        _fail(e)

    info = results.eval_info
    print(f"[blue]{file}[/blue]: {info.evaluator or 'unknown evaluator'}, steps={info.steps}")
    print(escape(results.format_statistics()))


if __name__ == "__main__":
    app()

# python -m ccperf.cli compare a.json b.json 0.95
