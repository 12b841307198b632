"""
Erros
=====

Hierarquia de excepções do checksum.

• ``OpenError`` / ``ReadError`` ficam contidos na tarefa de hashing do
  ficheiro respectivo (viram um ``ChecksumResult`` falhado).
• ``TraversalError`` fica contido no Walker.
• ``FatalError`` é o único que sobe até ao topo e define o exit status.
"""

from __future__ import annotations
from pathlib import Path


class ChecksumError(Exception):
    """Erro associado a um caminho concreto."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(reason)
        self.path = str(path)


class OpenError(ChecksumError):
    def __init__(self, path: str | Path, cause: BaseException) -> None:
        super().__init__(path, f"error while opening file {path}: {cause}")


class ReadError(ChecksumError):
    def __init__(self, path: str | Path, cause: BaseException) -> None:
        super().__init__(path, f"error while reading file {path}: {cause}")


class TraversalError(ChecksumError):
    def __init__(self, path: str | Path, cause: BaseException) -> None:
        super().__init__(path, f"cannot access {path}: {cause}")


class FatalError(Exception):
    """Condição irrecuperável: termina o processo com status != 0."""


__all__ = ["ChecksumError", "OpenError", "ReadError", "TraversalError", "FatalError"]
