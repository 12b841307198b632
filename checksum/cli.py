"""Linha de comandos: ``checksum [opções] {md5,sha1,sha256} PATH``."""

from __future__ import annotations

import signal
import threading
from dataclasses import dataclass
from pathlib import Path

import click

from checksum import settings
from checksum.core.hasher import BUF_SIZE, Algorithm
from checksum.core.logger import LineLogger, RunLog
from checksum.core.runner import run_checksums
from checksum.errors import FatalError

__version__ = "1.0.0"

_COMMANDS = ("md5", "sha1", "sha256")
_ALGORITHMS: dict[str, Algorithm] = {name: Algorithm.from_name(name) for name in _COMMANDS}


@dataclass
class Options:
    verbose: bool = False
    max_workers: int | None = None
    buffer_size: int | None = None
    strict: bool = False
    pdf_report: Path | None = None
    json_log: Path | None = None


@click.group(help="A command line utility for computing checksums.")
@click.version_option(__version__, prog_name="checksum")
@click.option("--verbose", is_flag=True, help="Enable verbose mode.")
@click.option("--max-workers", type=click.IntRange(min=0), default=None,
              help="Maximum concurrent hashing threads (0 = one thread per file).")
@click.option("--buffer-size", type=click.IntRange(min=1), default=None,
              help="Bytes read per chunk.")
@click.option("--strict", is_flag=True,
              help="Always report failures and exit with status 1 if any file failed.")
@click.option("--pdf-report", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Write a PDF report into this folder.")
@click.option("--json-log", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Write a JSON run log into this folder.")
@click.pass_context
def cli(ctx, verbose, max_workers, buffer_size, strict, pdf_report, json_log):
    ctx.obj = Options(verbose, max_workers, buffer_size, strict, pdf_report, json_log)


def _add_algorithm_command(name: str, label: str) -> None:
    @cli.command(name, help=f"Compute {label} checksum.")
    @click.argument("path", type=click.Path(exists=True))
    @click.pass_context
    def _command(ctx, path):
        _execute(ctx, name, path)


for _name in _COMMANDS:
    _add_algorithm_command(_name, _ALGORITHMS[_name].label)


def _setting_int(log: LineLogger, key: str, fallback: int | None) -> int | None:
    """Lê um inteiro positivo das settings; ausente/null/0 → `fallback`."""
    value = settings.get(key)
    if value is None or (type(value) is int and value == 0):
        return fallback
    if type(value) is not int or value < 1:
        log.fatal("invalid setting %s=%r in %s: expected a positive integer",
                  key, value, settings.path())
    return value


def _resolve_max_workers(opts: Options, log: LineLogger) -> int | None:
    # opção da CLI ganha; 0 = sem tecto
    if opts.max_workers is not None:
        return opts.max_workers or None
    return _setting_int(log, "max_workers", None)


def _execute(ctx: click.Context, name: str, root: str) -> None:
    opts: Options = ctx.obj
    log = LineLogger(verbose=opts.verbose)

    algorithm = _ALGORITHMS.get(name)
    if algorithm is None:
        log.fatal("Not yet implemented: %s", name)

    max_workers = _resolve_max_workers(opts, log)
    buf_size = opts.buffer_size or _setting_int(log, "buffer_size", BUF_SIZE)
    queue_size = _setting_int(log, "queue_size", 1)

    stop = threading.Event()
    previous = None
    if threading.current_thread() is threading.main_thread():
        previous = signal.signal(signal.SIGINT, lambda *_: stop.set())

    results: list = []
    run_log = RunLog(root, algorithm.label, opts.json_log) if opts.json_log else None

    def _on_result(result) -> None:
        if opts.pdf_report:
            results.append(result)
        if run_log:
            run_log.add_result(result)

    try:
        stats = run_checksums(
            root,
            algorithm,
            log,
            max_workers=max_workers,
            buf_size=buf_size,
            queue_size=queue_size,
            strict=opts.strict,
            stop_flag=stop.is_set,
            on_result=_on_result,
        )
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    if stop.is_set():
        log.error("Interrupted: %d of %d file(s) processed",
                  stats.files_hashed + stats.files_failed, stats.files_found)

    if opts.pdf_report:
        from checksum.pdf_report import generate_pdf_report
        pdf = generate_pdf_report(stats.as_dict(), results, opts.pdf_report)
        log.debug("PDF report written to %s", pdf)
    if run_log:
        log.debug("JSON log written to %s", run_log.close(stats))

    if stop.is_set() or (opts.strict and stats.files_failed):
        ctx.exit(1)


def main(argv: list[str] | None = None) -> int:
    """Ponto de entrada: o único sítio onde se decide o exit status."""
    settings.load()
    try:
        rv = cli.main(args=argv, prog_name="checksum", standalone_mode=False)
    except FatalError as exc:
        click.echo(f"fatal: {exc}", err=True)
        return 1
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    return rv if isinstance(rv, int) else 0


__all__ = ["cli", "main"]
