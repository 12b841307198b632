import sys

from checksum.cli import main

sys.exit(main())
