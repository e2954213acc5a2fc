"""Allow ``python -m k8s_rewrite``."""

import sys

from k8s_rewrite.cli import main

sys.exit(main())
