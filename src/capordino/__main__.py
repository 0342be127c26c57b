"""Allow running capordino as a module: python -m capordino"""

import sys

from capordino.cli import main

sys.exit(main())
