"""
runner.py  –  Função de alto-nível run_checksums()
=================================================

• Coordena Scanner → (fila) → tarefas de hashing → LineLogger
• O Scanner corre numa thread própria e entrega caminhos por uma fila
  limitada (por omissão capacidade 1: o Scanner só avança ao ritmo a
  que o ciclo de despacho consegue arrancar tarefas).
• Cada caminho recebido arranca uma thread de hashing.  Sem limite por
  omissão; com ``max_workers=N`` o ciclo de despacho espera por uma
  vaga antes de arrancar a próxima.
• Um WaitGroup cobre o Scanner e todas as tarefas: só se devolve o
  controlo depois de tudo terminar.
• Devolve um ``RunStats``.
"""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from .hasher import BUF_SIZE, Algorithm, ChecksumResult, checksum
from .scanner import scan
from .sync import WaitGroup


# --------------------------------------------------------------------------- #
#                               TIPO DE CALLBACKS                             #
# --------------------------------------------------------------------------- #
ResultCb = Callable[[ChecksumResult], Any]
StopFlag = Callable[[], bool]

_DONE = object()   # sentinela: o Scanner terminou


@dataclass
class RunStats:
    root: str
    algorithm: Algorithm
    files_found: int = 0
    files_hashed: int = 0
    files_failed: int = 0
    traversal_errors: int = 0
    bytes_hashed: int = 0
    start_time: str = ""
    end_time: str = ""
    duration: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, result: ChecksumResult) -> None:
        with self._lock:
            if result.ok:
                self.files_hashed += 1
                self.bytes_hashed += result.size
            else:
                self.files_failed += 1

    def record_traversal_error(self, _err) -> None:
        with self._lock:
            self.traversal_errors += 1

    def as_dict(self) -> dict:
        return {
            "root": self.root,
            "algorithm": self.algorithm.label,
            "files_found": self.files_found,
            "files_hashed": self.files_hashed,
            "files_failed": self.files_failed,
            "traversal_errors": self.traversal_errors,
            "bytes_hashed": self.bytes_hashed,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
        }


# --------------------------------------------------------------------------- #
#                                 FUNÇÃO PÚBLICA                              #
# --------------------------------------------------------------------------- #
def run_checksums(
    root: str | Path,
    algorithm: Algorithm,
    log,
    max_workers: int | None = None,
    buf_size: int = BUF_SIZE,
    queue_size: int = 1,
    strict: bool = False,
    stop_flag: StopFlag | None = None,
    on_result: ResultCb | None = None,
) -> RunStats:
    """
    Parameters
    ----------
    root        : ficheiro ou pasta de origem
    algorithm   : algoritmo usado em toda a execução
    log         : LineLogger partilhado por Scanner, despacho e hashing
    max_workers : tecto de threads de hashing vivas (None = sem tecto)
    buf_size    : bytes por leitura no hasher
    queue_size  : capacidade da fila Scanner → despacho (>= 1)
    strict      : falhas reportadas com log.error() em vez de debug
    stop_flag   : devolve True para cancelar (o que já arrancou termina)
    on_result   : chamado com cada ChecksumResult, a partir da thread
                  de hashing

    Returns
    -------
    RunStats
    """
    if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
        raise ValueError(f"max_workers must be >= 1 or None, got {max_workers!r}")
    if not isinstance(queue_size, int) or queue_size < 1:
        raise ValueError(f"queue_size must be >= 1, got {queue_size!r}")
    if not isinstance(buf_size, int) or buf_size < 1:
        raise ValueError(f"buf_size must be >= 1, got {buf_size!r}")

    stats = RunStats(root=str(root), algorithm=algorithm)
    stats.start_time = datetime.now().isoformat(timespec="seconds")
    t0 = time.monotonic()

    backlog: queue.Queue = queue.Queue(maxsize=queue_size)
    wg = WaitGroup()
    slots = threading.BoundedSemaphore(max_workers) if max_workers else None

    # ---------------------------------------------------- Scanner (produtor)
    def _scanner() -> None:
        # o Scanner é uma unidade do WaitGroup; _DONE sai antes do done()
        with wg:
            try:
                for path in scan(root, log=log, stop_flag=stop_flag,
                                 on_error=stats.record_traversal_error):
                    backlog.put(path)
            finally:
                # a fila fica "fechada" mesmo que o scan rebente
                backlog.put(_DONE)

    # ---------------------------------------------------- tarefa por ficheiro
    def _hash_task(path: str) -> None:
        try:
            try:
                result = checksum(path, algorithm, log, buf_size)
            except Exception as exc:  # noqa: BLE001
                # erro inesperado: fica contido neste ficheiro
                result = ChecksumResult(path, error=exc)
            stats.record(result)
            try:
                _report(result, log, strict)
                if on_result:
                    on_result(result)
            except Exception as exc:  # noqa: BLE001
                # nem o log nem o callback podem derrubar a thread
                log.error("Cannot report result for %r: %s", path, exc)
        finally:
            if slots:
                slots.release()
            wg.done()

    threading.Thread(target=_scanner, name="checksum-scanner", daemon=True).start()

    # ---------------------------------------------------- ciclo de despacho
    while True:
        path = backlog.get()
        if path is _DONE:
            break
        stats.files_found += 1
        if slots:
            slots.acquire()
        wg.add()
        try:
            threading.Thread(target=_hash_task, args=(path,), daemon=True).start()
        except RuntimeError as exc:
            # sem recursos para mais uma thread: calcula aqui mesmo
            log.debug("Cannot start hashing thread (%s), hashing inline", exc)
            _hash_task(path)

    wg.wait()

    stats.duration = time.monotonic() - t0
    stats.end_time = datetime.now().isoformat(timespec="seconds")
    return stats


def _report(result: ChecksumResult, log, strict: bool) -> None:
    if result.ok:
        log.info("%s: %s", result.path, result.digest)
    elif strict:
        log.error("Checksum error: %s", result.error)
    else:
        log.debug("Checksum error: %s", result.error)


__all__ = ["run_checksums", "RunStats"]
