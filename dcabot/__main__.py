import sys

from dcabot.cli import main

sys.exit(main())
