"""CLI commands for pywise."""

from __future__ import annotations

import logging
import sys
from typing import Any, NoReturn

import click

from pywise.algo.base import GenerationAlgorithm
from pywise.algo.combinatorial import CombinatorialAlgorithm
from pywise.algo.coverage import coverage_stats
from pywise.algo.legacy import LegacyPairwiseAlgorithm
from pywise.algo.pairwise import PairwiseAlgorithm
from pywise.cli.output import TableOutput
from pywise.config import ALGORITHMS, OUTPUT_FORMATS, GeneratorSettings, load_settings
from pywise.core.combination import CombinationTable
from pywise.errors import PyWiseError
from pywise.generator import TestGenerator
from pywise.model import load_model


def setup_logging(level: str, verbose: bool) -> None:
    """Configure logging based on settings and verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _fail(error: PyWiseError, verbose: bool) -> NoReturn:
    message = error.format_verbose() if verbose else str(error)
    click.echo(message, err=True)
    sys.exit(1)


def _generator(model: str, verbose: bool) -> TestGenerator:
    try:
        return TestGenerator(load_model(model))
    except PyWiseError as e:
        _fail(e, verbose)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to settings file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """pywise - constraint-aware pairwise and combinatorial test generation."""
    ctx.ensure_object(dict)

    try:
        settings = load_settings(config)
    except PyWiseError as e:
        _fail(e, verbose)
    if verbose:
        settings.verbose = True

    ctx.obj["settings"] = settings
    ctx.obj["output"] = TableOutput()

    setup_logging(settings.log_level, settings.verbose)


def _options(ctx: click.Context, **overrides: Any) -> GeneratorSettings:
    settings: GeneratorSettings = ctx.obj["settings"]
    values = {k: v for k, v in overrides.items() if v is not None}
    return settings.model_copy(update=values)


def _algorithm(settings: GeneratorSettings) -> GenerationAlgorithm:
    """Build the algorithm named by ``settings.algorithm``."""
    if settings.algorithm == "combinatorial":
        return CombinatorialAlgorithm(limit=settings.limit, seed=settings.seed)
    algorithm_cls = LegacyPairwiseAlgorithm if settings.algorithm == "legacy" else PairwiseAlgorithm
    return algorithm_cls(jump=settings.jump, seed=settings.seed)


def _run(generator: TestGenerator, settings: GeneratorSettings) -> CombinationTable:
    try:
        return generator.generate(_algorithm(settings))
    except PyWiseError as e:
        _fail(e, settings.verbose)


def _show(ctx: click.Context, table: CombinationTable, title: str, settings: GeneratorSettings) -> None:
    output: TableOutput = ctx.obj["output"]
    output.show(table, title=f"{title} ({len(table)} combinations)", output_format=settings.output_format)
    if table.incomplete:
        click.echo(f"Warning: {len(table.incomplete)} combination(s) could not be completed", err=True)


@cli.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False))
@click.option("--algorithm", "-a", type=click.Choice(list(ALGORITHMS)), help="Generation algorithm")
@click.option("--jump", type=click.IntRange(min=1), help="Queue step size")
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Maximum number of combinations")
@click.option("--seed", type=int, help="Random seed for reproducible output")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(list(OUTPUT_FORMATS)),
    help="Output format",
)
@click.pass_context
def generate(
    ctx: click.Context,
    model: str,
    algorithm: str | None,
    jump: int | None,
    limit: int | None,
    seed: int | None,
    output_format: str | None,
) -> None:
    """Generate combinations for MODEL with the configured algorithm."""
    settings = _options(
        ctx, algorithm=algorithm, jump=jump, limit=limit, seed=seed, output_format=output_format
    )
    generator = _generator(model, settings.verbose)
    table = _run(generator, settings)
    _show(ctx, table, settings.algorithm.capitalize(), settings)


@cli.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False))
@click.option("--legacy", is_flag=True, help="Use the merge-based legacy algorithm")
@click.option("--jump", type=click.IntRange(min=1), help="Queue step size")
@click.option("--seed", type=int, help="Random seed for reproducible output")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(list(OUTPUT_FORMATS)),
    help="Output format",
)
@click.pass_context
def pairwise(
    ctx: click.Context,
    model: str,
    legacy: bool,
    jump: int | None,
    seed: int | None,
    output_format: str | None,
) -> None:
    """Generate a pairwise cover for MODEL."""
    settings = _options(ctx, jump=jump, seed=seed, output_format=output_format)
    # Only the pairwise variants apply here; "combinatorial" falls back to pairwise.
    use_legacy = legacy or settings.algorithm == "legacy"
    settings = settings.model_copy(update={"algorithm": "legacy" if use_legacy else "pairwise"})
    generator = _generator(model, settings.verbose)
    table = _run(generator, settings)
    _show(ctx, table, "Pairwise", settings)


@cli.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Maximum number of combinations")
@click.option("--seed", type=int, help="Random seed used when truncating")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(list(OUTPUT_FORMATS)),
    help="Output format",
)
@click.pass_context
def combinatorial(
    ctx: click.Context,
    model: str,
    limit: int | None,
    seed: int | None,
    output_format: str | None,
) -> None:
    """Generate every valid combination of MODEL."""
    settings = _options(
        ctx, algorithm="combinatorial", limit=limit, seed=seed, output_format=output_format
    )
    generator = _generator(model, settings.verbose)
    table = _run(generator, settings)
    _show(ctx, table, "Combinatorial", settings)


@cli.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False))
@click.option("--algorithm", "-a", type=click.Choice(list(ALGORITHMS)), help="Algorithm to measure")
@click.option("--legacy", is_flag=True, help="Measure the legacy algorithm")
@click.option("--seed", type=int, help="Random seed for reproducible output")
@click.pass_context
def stats(
    ctx: click.Context,
    model: str,
    algorithm: str | None,
    legacy: bool,
    seed: int | None,
) -> None:
    """Show pair coverage of a generation run over MODEL."""
    settings = _options(ctx, algorithm="legacy" if legacy else algorithm, seed=seed)
    generator = _generator(model, settings.verbose)
    table = _run(generator, settings)

    output: TableOutput = ctx.obj["output"]
    output.show_stats(coverage_stats(table, generator.parameter_set), span=generator.span)
