"""Allow ``python -m prdigest``."""

import sys

from prdigest.main import main

sys.exit(main())
