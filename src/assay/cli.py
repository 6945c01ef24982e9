from __future__ import annotations

import sys
from pathlib import Path

import typer

from assay.errors import AssayError

app = typer.Typer(name="assay", help="Run unit-test suites with live console progress")

# POSIX exit statuses wrap at 256
MAX_EXIT_STATUS = 255


@app.command()
def run(
    config: str = typer.Argument(help="Path to assay YAML config"),
    suite: list[str] | None = typer.Option(
        None, "--suite", "-s", help="Run only this suite (repeatable)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show individual tests and assertions"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Don't output anything (overrides --verbose)"
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable highlighting of suite and test verdicts"
    ),
    junit: str | None = typer.Option(None, help="Write JUnit XML results to this path"),
    debug_log: str | None = typer.Option(
        None, "--debug-log", help="Append engine diagnostics to this file"
    ),
):
    """Run the configured suites. Exit status is the number of failed assertions."""
    from assay.config import load_config
    from assay.driver import Driver
    from assay.registry import load_registry
    from assay.runner import Runner
    from assay.verbose import setup_logger

    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(2)

    try:
        run_config = load_config(config_path)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    # Command-line flags override the config file
    if verbose:
        run_config.verbose = True
    if quiet:
        run_config.quiet = True
    if no_color:
        run_config.color = False

    for search_path in reversed(run_config.paths):
        if search_path not in sys.path:
            sys.path.insert(0, search_path)

    setup_logger(Path(debug_log) if debug_log else None, logger_name="assay")

    try:
        registry = load_registry(run_config.suites)
        if suite:
            registry = registry.filtered(suite)
    except AssayError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    runner = Runner(
        verbose=run_config.verbose,
        quiet=run_config.quiet,
        color=run_config.color,
        status_line_capacity=run_config.status_line_capacity,
    )
    driver = Driver(registry, runner, capture_logger=run_config.capture_logger)

    try:
        failed = driver.run()
    except AssayError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    if junit:
        from assay.reporting.junit import write_junit

        junit_path = write_junit(Path(junit), runner.results)
        if not run_config.quiet:
            typer.echo(f"JUnit report: {junit_path}")

    raise typer.Exit(min(failed, MAX_EXIT_STATUS))


@app.command()
def init(
    dir: str = typer.Option(
        "assay", "--dir", help="Directory to initialize the test project in"
    ),
):
    """Initialize a test project with an example config and suite module."""
    project_dir = Path(dir)

    if not project_dir.exists():
        project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / "assay.yaml"
    if example.exists():
        typer.echo(f"assay.yaml already exists in {dir}, skipping.")
        return

    example.write_text("""\
verbose: false
color: true
paths:
  - .
suites:
  - title: arithmetic
    target: example_suites:arithmetic
  - title: temp files
    target: example_suites:temp_files
""")

    (project_dir / "example_suites.py").write_text('''\
import os

from assay import check, check_op, current_runner, run_test
from assay.fixtures import use_temp_file


def test_addition():
    check_op("==", 1 + 1, 2, left_expr="1 + 1", right_expr="2")


def test_loop():
    for i in range(10):
        check(i >= 0, "loop index is non-negative")


def arithmetic():
    run_test("addition", test_addition)
    run_test("loop", test_loop)


def temp_files():
    fixture = use_temp_file(current_runner())

    def test_write():
        written = os.write(fixture.fd, b"hello")
        check_op("==", written, 5, left_expr="bytes written")

    run_test("write", test_write)
''')

    typer.echo(f"Initialized test project in {dir}:")
    typer.echo("  assay.yaml         - example run config")
    typer.echo("  example_suites.py  - example suites")
