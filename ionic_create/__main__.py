"""Allow ``python -m ionic_create``."""

import sys

from ionic_create.cli import main

sys.exit(main())
