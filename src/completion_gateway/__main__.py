"""Allow ``python -m completion_gateway``."""

import sys

from completion_gateway.cli import main

sys.exit(main())
