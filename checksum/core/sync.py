"""
WaitGroup
=========

Contador de tarefas pendentes com espera bloqueante.  Ao contrário de um
``threading.Barrier``, o número de participantes não precisa de ser
conhecido à partida: ``add()`` pode ser chamado depois de alguém já
estar em ``wait()``, desde que o contador ainda não tenha chegado a zero.

    wg = WaitGroup()
    wg.add()
    threading.Thread(target=lambda: (trabalho(), wg.done())).start()
    wg.wait()

Também pode ser usado como context-manager (o bloco conta como uma
tarefa pendente)::

    with wg:
        executar_tarefa()
"""

from __future__ import annotations
import threading


class WaitGroup:
    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition(threading.Lock())

    def add(self, n: int = 1) -> None:
        with self._cond:
            if self._count + n < 0:
                raise ValueError("WaitGroup counter would become negative")
            self._count += n
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self) -> None:
        """Bloqueia até o contador voltar a zero."""
        with self._cond:
            self._cond.wait_for(lambda: self._count == 0)

    # --------- suporte a "with" ---------------------------------

    def __enter__(self) -> "WaitGroup":
        self.add()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.done()
        # não suprime exceções
        return False


__all__ = ["WaitGroup"]
