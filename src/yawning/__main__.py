"""Allow ``python -m yawning``; the detached worker is started this way."""

import sys

from .cli.main import main_cli

sys.exit(main_cli())
