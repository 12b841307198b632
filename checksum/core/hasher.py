from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass
from pathlib import Path

from checksum.errors import OpenError, ReadError

# ---- Configuração --------------------------------------------
BUF_SIZE = 4 * 1024 * 1024   # 4 MiB por leitura: bom equilíbrio CPU/I/O
# --------------------------------------------------------------


class Algorithm(enum.Enum):
    """Algoritmos suportados: valor = nome no ``hashlib``."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"

    @property
    def label(self) -> str:
        return {"md5": "MD5", "sha1": "SHA-1", "sha256": "SHA-256"}[self.value]

    @classmethod
    def from_name(cls, name: str) -> "Algorithm":
        key = name.lower().replace("-", "")
        for algo in cls:
            if algo.value == key:
                return algo
        raise ValueError(f"unsupported algorithm: {name}")


@dataclass(frozen=True)
class ChecksumResult:
    """Resultado de um ficheiro: digest *ou* erro, nunca os dois."""

    path: str
    digest: str | None = None
    error: Exception | None = None
    size: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _hash_file(path: Path, algo: Algorithm, buf_size: int) -> tuple[str, int]:
    """Devolve (digest hexadecimal, bytes lidos), lendo em blocos de `buf_size`."""
    h = hashlib.new(algo.value)
    try:
        f = open(path, "rb")
    except OSError as exc:
        raise OpenError(path, exc) from exc

    size = 0
    with f:
        try:
            while True:
                chunk = f.read(buf_size)
                if not chunk:
                    break
                h.update(chunk)
                size += len(chunk)
        except OSError as exc:
            raise ReadError(path, exc) from exc
    return h.hexdigest(), size


def checksum(path: str | Path, algo: Algorithm, log=None,
             buf_size: int = BUF_SIZE) -> ChecksumResult:
    """
    Calcula o *digest* hexadecimal (minúsculas) de `path`.

    Lê o ficheiro em blocos de `buf_size` bytes, por isso não carrega o
    ficheiro inteiro em memória.  Erros de abertura/leitura não são
    lançados: voltam como ``ChecksumResult`` com ``error`` preenchido
    (``OpenError`` / ``ReadError``).  O ficheiro é sempre fechado.
    """
    if not isinstance(buf_size, int) or buf_size < 1:
        raise ValueError(f"buf_size must be a positive integer, got {buf_size!r}")
    if log:
        log.debug("Computing %s checksum for file: %s", algo.label, path)
    try:
        digest, size = _hash_file(Path(path), algo, buf_size)
    except (OpenError, ReadError) as exc:
        return ChecksumResult(str(path), error=exc)
    if log:
        log.debug("%s for %s: %s", algo.label, path, digest)
    return ChecksumResult(str(path), digest=digest, size=size)


__all__ = ["Algorithm", "ChecksumResult", "checksum", "BUF_SIZE"]
