"""
Logging
=======

``LineLogger``
    Escreve linhas completas em dois streams (normal / debug) debaixo de
    um único lock, para que linhas de threads diferentes nunca se
    misturem.  As linhas de debug só aparecem com ``verbose=True``.
    ``fatal()`` não escreve nem termina nada: lança ``FatalError`` e
    quem está no topo (``checksum.cli.main``) decide o exit status.

``RunLog``
    Ficheiro JSON (nome inclui timestamp UTC) com as estatísticas de
    uma execução e as listas de ficheiros calculados e com erro.
"""

from __future__ import annotations

import json
import os
import sys
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import IO

import click

from checksum.errors import FatalError

_LINE_TERMINATOR = "\n"


class LineLogger:
    def __init__(self, verbose: bool = False,
                 out: IO[str] | None = None, err: IO[str] | None = None) -> None:
        self.verbose = verbose
        self._out = out
        self._err = err
        self._lock = threading.Lock()

    # streams resolvidos só na escrita: o CliRunner troca sys.stdout
    @property
    def out(self) -> IO[str]:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> IO[str]:
        return self._err if self._err is not None else sys.stderr

    # -------------------------------------------------------------- API
    def info(self, fmt: str, *args) -> None:
        self._print(self.out, fmt, args)

    def debug(self, fmt: str, *args) -> None:
        if self.verbose:
            self._print(self.err, fmt, args)

    def error(self, fmt: str, *args) -> None:
        self._print(self.err, fmt, args)

    def fatal(self, fmt: str, *args) -> None:
        raise FatalError(self._format(fmt, args))

    # -------------------------------------------------------------- helpers
    @staticmethod
    def _format(fmt: str, args: tuple) -> str:
        return fmt % args if args else fmt

    @staticmethod
    def _payload(stream: IO[str], line: str) -> str | bytes:
        """
        Nomes de ficheiros que não são UTF-8 válido chegam do ``os.scandir``
        com surrogates; nesse caso escreve-se os bytes originais
        (``os.fsencode``) e o click encaminha-os para o buffer binário.
        """
        try:
            line.encode(getattr(stream, "encoding", None) or "utf-8")
        except UnicodeEncodeError:
            if getattr(stream, "buffer", None) is not None:
                return os.fsencode(line)
        return line

    def _print(self, stream: IO[str], fmt: str, args: tuple) -> None:
        line = self._format(fmt, args)
        if not line.endswith(_LINE_TERMINATOR):
            line += _LINE_TERMINATOR
        with self._lock:
            click.echo(self._payload(stream, line), file=stream, nl=False)
            stream.flush()


class RunLog:
    # -------------------------------------------------------------- construtor
    def __init__(self, root: str | Path, algorithm: str, dest: str | Path) -> None:
        dest = Path(dest)
        dest.mkdir(parents=True, exist_ok=True)

        now = datetime.now(timezone.utc)
        self.path = dest / f"checksum_log_{now.strftime('%Y-%m-%dT%H-%M-%S')}.json"
        self._lock = threading.Lock()

        self.data: dict = {
            "timestamp": now.isoformat(timespec="seconds"),
            "root": str(root),
            "algorithm": algorithm,
            "files_found": 0,
            "files_hashed": 0,
            "files_failed": 0,
            "traversal_errors": 0,
            "bytes_hashed": 0,
            "duration_sec": 0.0,
            "duration": "0:00:00",
            # listas p/ registar cada ficheiro
            "hashed": [],          # [{"path": "...", "digest": "...", "size": 1234}]
            "errors": [],          # [{"path": "...", "error": "..."}]
        }

    # -------------------------------------------------------------- API p/ runner
    def add_result(self, result) -> None:
        with self._lock:
            if result.ok:
                self.data["hashed"].append(
                    {"path": result.path, "digest": result.digest, "size": result.size})
            else:
                self.data["errors"].append({"path": result.path, "error": str(result.error)})

    # -------------------------------------------------------------- fechar / gravar
    def close(self, stats) -> Path:
        self.data.update(
            files_found=stats.files_found,
            files_hashed=stats.files_hashed,
            files_failed=stats.files_failed,
            traversal_errors=stats.traversal_errors,
            bytes_hashed=stats.bytes_hashed,
            duration_sec=round(stats.duration, 2),
            duration=str(timedelta(seconds=int(stats.duration))),
        )

        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(self.data, fh, indent=2, ensure_ascii=False)

        return self.path


__all__ = ["LineLogger", "RunLog"]
