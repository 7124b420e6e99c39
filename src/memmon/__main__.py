"""Allow running memmon with ``python -m memmon``."""

import sys

from memmon.cli import main

sys.exit(main())
