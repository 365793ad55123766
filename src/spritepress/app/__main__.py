"""Allow ``python -m spritepress.app``."""

import sys

from .cli import main

sys.exit(main())
