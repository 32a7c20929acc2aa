"""Allow ``python -m create_ps``."""

import sys

from create_ps.pipeline import main

sys.exit(main())
