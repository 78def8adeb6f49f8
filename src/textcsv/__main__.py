"""Allow ``python -m textcsv``."""

import sys

from textcsv.cli import main

sys.exit(main())
