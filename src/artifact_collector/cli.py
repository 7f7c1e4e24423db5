"""CLI interface for the artifact collector."""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import NoReturn

import click

from artifact_collector.core.collector import collect
from artifact_collector.core.discovery import detect_language, discover
from artifact_collector.core.engine import ClassificationEngine
from artifact_collector.core.inspector import INSPECTORS, ArchiveInspector, get_inspector
from artifact_collector.core.registry import default_registry
from artifact_collector.core.report import NO_APPLICATIONS
from artifact_collector.core.scratch import purge_stale_scratch
from artifact_collector.errors import ConfigurationError
from artifact_collector.models.classification import Classification, ClassificationSet, ClassifiedArtifact
from artifact_collector.rules.context import HeuristicOptions
from artifact_collector.settings import DEFAULT_INSPECTOR, DEFAULT_OUTPUT_DIR, Settings
from artifact_collector.utils import bytes_to_human, format_elapsed

_CLASS_STYLE = {
    Classification.COMPILED_APPLICATION: ("✓", "green"),
    Classification.THIRD_PARTY_LIBRARY: ("·", "blue"),
    Classification.TEST_ARTIFACT: ("·", "bright_black"),
    Classification.INVALID_ARCHIVE: ("✗", "red"),
}


def _setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _build_engine(settings: Settings, inspector_id: str) -> ClassificationEngine:
    inspector: ArchiveInspector = get_inspector(inspector_id)
    options = HeuristicOptions.with_extras(
        vendor_prefixes=settings.get_list("assemblies.vendor_prefixes"),
        namespace_prefixes=settings.get_list("archives.namespace_prefixes"),
    )
    return ClassificationEngine(default_registry(), inspector, options)


def _classify(input_dir: Path, inspector_id: str, jobs: int, exclude: Path | None = None) -> tuple[ClassificationSet, str]:
    settings = Settings()
    try:
        engine = _build_engine(settings, inspector_id)
    except ConfigurationError as exc:
        _fail(str(exc))
    purge_stale_scratch()
    candidates = discover(input_dir, exclude=exclude)
    language = detect_language(candidates)
    return engine.classify_all(candidates, jobs=jobs), language


def _format_artifact(result: ClassifiedArtifact) -> str:
    mark, colour = _CLASS_STYLE[result.classification]
    line = (
        f"  {click.style(mark, fg=colour)} {str(result.candidate.relative_path):50s} "
        f"{click.style(result.classification.label, fg=colour)} ({result.rule_id})"
    )
    if result.symbol is not None:
        line += click.style(f" + {result.symbol.name}", fg="cyan")
    elif result.symbol_missing:
        line += click.style(" [missing PDB]", fg="yellow")
    return line


def _artifact_json(result: ClassifiedArtifact) -> dict:
    return {
        "path": str(result.candidate.relative_path),
        "kind": result.candidate.kind,
        "classification": result.classification.value,
        "rule": result.rule_id,
        "symbol": str(result.symbol) if result.symbol else None,
        "symbol_missing": result.symbol_missing,
        "collect": result.is_retained,
    }


@click.group()
@click.option("-v", "--verbose", is_flag=True, envvar="VERBOSE", help="Enable verbose output (env: VERBOSE)")
@click.option("-d", "--debug", is_flag=True, envvar="DEBUG", help="Enable debug output (env: DEBUG)")
def main(verbose: bool, debug: bool) -> None:
    """Collect Java and .NET build artifacts for security scanning."""
    _setup_logging(verbose, debug)


# ── collect ──────────────────────────────────────────────────────────────

@main.command("collect")
@click.argument("input_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-o", "--output", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help=f"Output folder (default: {DEFAULT_OUTPUT_DIR})")
@click.option("--inspector", type=click.Choice(list(INSPECTORS)), default=None,
              help=f"Archive inspection backend (default: {DEFAULT_INSPECTOR})")
@click.option("-j", "--jobs", type=click.IntRange(min=1), default=1, show_default=True,
              help="Classify archives in parallel")
@click.option("--no-bundle", is_flag=True, help="Keep .NET files loose instead of zipping them")
@click.option("--json", "as_json", is_flag=True, help="Output the summary as JSON")
def collect_cmd(
    input_dir: Path,
    output_dir: Path | None,
    inspector: str | None,
    jobs: int,
    no_bundle: bool,
    as_json: bool,
) -> None:
    """Classify artifacts under INPUT_DIR and collect the compiled applications."""
    settings = Settings()
    output = output_dir or Path(settings.get("collect.output_dir", DEFAULT_OUTPUT_DIR))
    inspector_id = inspector or settings.get("collect.inspector", DEFAULT_INSPECTOR)

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Analyzing {input_dir}...\n")

    start = time.monotonic()
    classified, language = _classify(input_dir, inspector_id, jobs, exclude=output)

    def on_progress(name: str, status: str) -> None:
        if as_json:
            return
        if status == "collected":
            click.echo(f"  {click.style('✓', fg='green')} {name}")
        elif status == "duplicate":
            click.echo(f"  {click.style('·', fg='bright_black')} {name:40s} — duplicate, already collected")
        elif status == "error":
            click.echo(f"  {click.style('✗', fg='red')} {name:40s} — copy failed")

    try:
        result = collect(
            classified,
            input_dir,
            output,
            detected_language=language,
            bundle=not no_bundle,
            on_progress=on_progress,
        )
    except ConfigurationError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"Cannot write summary: {exc}")

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    counts = result.counts
    click.echo()
    if not result.has_applications:
        click.echo(click.style(NO_APPLICATIONS, fg="yellow"))
    click.echo(f"  Detected language:     {language}")
    click.echo(f"  Compiled applications: {counts[Classification.COMPILED_APPLICATION]}")
    click.echo(f"  3rd party libraries:   {counts[Classification.THIRD_PARTY_LIBRARY]}")
    click.echo(f"  Test artifacts:        {counts[Classification.TEST_ARTIFACT]}")
    click.echo(f"  Invalid archives:      {counts[Classification.INVALID_ARCHIVE]}")
    if result.missing_symbols:
        click.echo(click.style(f"\n  {len(result.missing_symbols)} assemblies are missing PDB files:", fg="yellow"))
        for name in result.missing_symbols:
            click.echo(f"    - {name}")
    if result.bundle is not None:
        click.echo(f"\n  Bundled .NET artifacts into {click.style(result.bundle.path.name, fg='cyan')}")

    click.echo(
        f"\nCollected {click.style(str(result.total_collected), fg='green', bold=True)} files "
        f"({bytes_to_human(result.bytes_copied)}) into {output} "
        f"in {format_elapsed(time.monotonic() - start)}\n"
    )


# ── classify ─────────────────────────────────────────────────────────────

@main.command()
@click.argument("input_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--inspector", type=click.Choice(list(INSPECTORS)), default=None,
              help=f"Archive inspection backend (default: {DEFAULT_INSPECTOR})")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def classify(input_dir: Path, inspector: str | None, as_json: bool) -> None:
    """Classify artifacts under INPUT_DIR without copying anything."""
    settings = Settings()
    inspector_id = inspector or settings.get("collect.inspector", DEFAULT_INSPECTOR)
    classified, language = _classify(input_dir, inspector_id, jobs=1)

    if as_json:
        data = {
            "detected_language": language,
            "artifacts": [_artifact_json(r) for r in classified.ordered],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not classified.ordered:
        click.echo("No Java or .NET artifacts found.")
        return

    for result in classified.ordered:
        click.echo(_format_artifact(result))
    if not classified.to_collect:
        click.echo(f"\n{click.style(NO_APPLICATIONS, fg='yellow')}")
    click.echo()


# ── rules ────────────────────────────────────────────────────────────────

@main.command("rules")
def rules_cmd() -> None:
    """List classification rules in precedence order."""
    registry = default_registry()
    for group_id, members in registry.get_groups().items():
        group = registry.group_info(group_id)
        click.echo(f"\n  {click.style(group.name if group else group_id, fg='blue', bold=True)}")
        for rule in members:
            _, colour = _CLASS_STYLE[rule.classification]
            kinds = ",".join(rule.kinds)
            click.echo(
                f"    {click.style(rule.id, fg='cyan', bold=True):40s} "
                f"{click.style(rule.classification.label, fg=colour)} [{kinds}]"
            )
            click.echo(f"      {rule.description}")
    click.echo(f"\n  Anything else: {Classification.COMPILED_APPLICATION.label}\n")
