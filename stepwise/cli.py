"""
CLI for stepwise
Provides run, lint, describe and sample commands
"""

import logging
import os
import sys


try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError:
    print("Error: CLI dependencies not installed.")
    print("Install with: pip install typer rich")
    sys.exit(1)

from .errors import PipelineError, type_name
from .kernel.pipeline import Pipeline
from .loader import build_pipeline, lint_pipeline, load_pipeline_config
from .samples import sample_pipeline


app = typer.Typer(help="stepwise pipeline CLI")
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(
        os.getenv("STEPWISE_LOG_LEVEL", "WARNING"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Type-keyed step executor"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def run(
    pipeline_path: str = typer.Argument(..., help="Path to pipeline YAML file"),
):
    """Load a pipeline file and execute it"""
    pipeline = _load(pipeline_path)
    _execute(pipeline)


@app.command()
def lint(
    pipeline_path: str = typer.Argument(..., help="Path to pipeline YAML file"),
):
    """Validate a pipeline file and check step wiring without executing"""
    console.print(f"\n[bold]Linting {pipeline_path}...[/bold]\n")

    pipeline = _load(pipeline_path)
    console.print("[green]✓[/green] Schema validation passed")
    console.print("[green]✓[/green] All references imported")

    warnings = lint_pipeline(pipeline)
    if warnings:
        console.print(f"\n[yellow]⚠[/yellow] {len(warnings)} warnings:")
        for warning in warnings:
            console.print(f"  - {warning}")
    else:
        console.print("\n[green]✓[/green] No warnings")
    console.print()


@app.command()
def describe(
    pipeline_path: str = typer.Argument(..., help="Path to pipeline YAML file"),
):
    """Show the steps of a pipeline file with their dependencies and results"""
    pipeline = _load(pipeline_path)

    table = Table(title="Steps")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Depends on", style="magenta")
    table.add_column("Produces", style="green")

    for index, descriptor in enumerate(pipeline.steps):
        info = descriptor.to_dict()
        deps = ", ".join(f"{d['name']}: {d['type']}" for d in info["dependencies"]) or "-"
        table.add_row(str(index), descriptor.name, deps, info["result_type"] or "-")

    console.print(table)

    observed = pipeline.observed_types()
    if observed:
        console.print("Observed: " + ", ".join(t.__name__ for t in observed))


@app.command()
def sample():
    """Run the bundled sample pipeline"""
    _execute(sample_pipeline())


def _load(pipeline_path: str) -> Pipeline:
    try:
        config = load_pipeline_config(pipeline_path)
        return build_pipeline(config)
    except PipelineError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}\n")
        sys.exit(1)


def _execute(pipeline: Pipeline) -> None:
    try:
        pipeline.execute()
    except PipelineError as e:
        console.print(f"[bold red]✗ Pipeline failed:[/bold red] {e}\n")
        sys.exit(1)

    table = Table(title="Results")
    table.add_column("Type", style="cyan")
    table.add_column("Value", style="green")
    for result_type, value in pipeline.results.snapshot().items():
        table.add_row(type_name(result_type), repr(value))
    console.print(table)


if __name__ == "__main__":
    app()
