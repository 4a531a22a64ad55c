"""Allow running as ``python -m gitlines``."""

import sys

from gitlines.cli.main import main

sys.exit(main())
