# -*- coding: utf-8 -*-
"""Bootstrap da linha de comandos (equivalente a ``python -m checksum``)."""
import sys

if __name__ == "__main__":
    from checksum.cli import main
    sys.exit(main())
