# checksum/pdf_report.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable
import datetime

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def generate_pdf_report(stats: Dict, results: Iterable, destino: str | Path) -> Path:
    """Gera um relatório PDF de uma execução.

    O ficheiro é guardado com o nome ``checksum_report_<data>_<hora>.pdf``.

    Parameters
    ----------
    stats: Dict
        ``RunStats.as_dict()`` da execução.
    results: Iterable
        ``ChecksumResult`` recolhidos (ordenados por caminho no PDF).
    destino: str | Path
        Pasta onde o relatório será guardado.

    Returns
    -------
    Path
        Caminho para o ficheiro PDF criado.
    """
    destino = Path(destino)
    destino.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    pdf_path = destino / f"checksum_report_{timestamp}.pdf"

    c = canvas.Canvas(str(pdf_path), pagesize=A4)
    width, height = A4
    y = height - 50

    def _line(text: str, x: int = 50, font: str = "Helvetica", size: int = 10) -> None:
        nonlocal y
        if y < 50:
            c.showPage()
            y = height - 50
        c.setFont(font, size)
        c.drawString(x, y, text)
        y -= size + 6

    def _format_size(n: int) -> str:
        if n >= 1 << 30:
            return f"{n / (1 << 30):.2f} GB"
        return f"{n / (1 << 20):.2f} MB"

    _line("Checksum report", font="Helvetica-Bold", size=16)
    y -= 14

    linhas = [
        f"Root            : {stats.get('root')}",
        f"Algorithm       : {stats.get('algorithm')}",
        f"Start           : {stats.get('start_time')}",
        f"End             : {stats.get('end_time')}",
        f"Duration        : {datetime.timedelta(seconds=int(stats.get('duration', 0)))}",
        f"Files found     : {stats.get('files_found', 0)}",
        f"Files hashed    : {stats.get('files_hashed', 0)}",
        f"Files failed    : {stats.get('files_failed', 0)}",
        f"Traversal errors: {stats.get('traversal_errors', 0)}",
        f"Data hashed     : {_format_size(stats.get('bytes_hashed', 0))}",
    ]
    for linha in linhas:
        _line(linha, size=12)

    ordenados = sorted(results, key=lambda r: r.path)
    ok = [r for r in ordenados if r.ok]
    falhas = [r for r in ordenados if not r.ok]

    if ok:
        y -= 10
        _line("Digests:", font="Helvetica-Bold", size=12)
        for r in ok:
            _line(f"{r.path}: {r.digest}", x=60, font="Courier", size=8)

    if falhas:
        y -= 10
        _line("Errors:", font="Helvetica-Bold", size=12)
        for r in falhas:
            _line(str(r.error), x=60, font="Courier", size=8)

    c.save()
    return pdf_path
