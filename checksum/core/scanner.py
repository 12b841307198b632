"""
Scanner
-------

Percorre recursivamente a árvore de *root* e gera o caminho de cada
ficheiro regular encontrado (profundidade primeiro; a ordem dentro de
uma pasta é a de ``os.scandir`` e não deve ser usada por ninguém).

Regras para tipos especiais:

• link simbólico para ficheiro regular → tratado como ficheiro;
• link simbólico para pasta → não se desce (evita ciclos);
• links quebrados, devices, FIFOs e sockets → ignorados.

Erros ao listar uma pasta ou ao ler os metadados de uma entrada não
abortam a travessia: são reportados no log (debug) e o scan continua
com as entradas irmãs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterator

from checksum.errors import TraversalError


def scan(
    root: str | Path,
    log=None,
    stop_flag: Callable[[], bool] | None = None,
    on_error: Callable[[TraversalError], None] | None = None,
) -> Iterator[str]:
    """
    Parameters
    ----------
    root      : pasta (ou ficheiro) de origem
    log       : LineLogger onde são reportados os TraversalError
    stop_flag : devolve True para parar de emitir caminhos
    on_error  : chamado com cada TraversalError (estatísticas)

    Yields
    ------
    str
        Caminho de cada ficheiro regular, relativo a *root* se *root*
        também o for.
    """
    root = os.fspath(root)
    if log:
        log.debug("Looking for files in root directory: %s", root)
    if stop_flag is None:
        stop_flag = lambda: False  # noqa: E731

    try:
        is_dir = os.path.isdir(root)
        if not is_dir and not os.path.isfile(root):
            os.stat(root)  # força o OSError com a causa real
            return
    except OSError as exc:
        _report(TraversalError(root, exc), log, on_error)
        return

    if not is_dir:
        if not stop_flag():
            yield root
        return

    yield from _walk_dir(root, log, stop_flag, on_error)


def _walk_dir(root: str, log, stop_flag, on_error) -> Iterator[str]:
    # Pilha explícita: árvores profundas não rebentam com a recursão
    stack = [root]
    while stack:
        curr = stack.pop()
        try:
            with os.scandir(curr) as it:
                entries = list(it)
        except OSError as exc:
            _report(TraversalError(curr, exc), log, on_error)
            continue

        subdirs = []
        for entry in entries:
            if stop_flag():
                return
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
                elif entry.is_file():
                    yield entry.path
            except OSError as exc:
                _report(TraversalError(entry.path, exc), log, on_error)

        # invertido para que a primeira sub-pasta seja a próxima a sair
        stack.extend(reversed(subdirs))


def _report(err: TraversalError, log, on_error) -> None:
    if log:
        log.debug("Traversal error: %s", err)
    if on_error:
        on_error(err)


__all__ = ["scan"]
