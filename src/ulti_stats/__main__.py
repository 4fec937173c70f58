"""Allow ``python -m ulti_stats``."""

import sys

from .cli import main

sys.exit(main())
