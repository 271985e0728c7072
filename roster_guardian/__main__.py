import sys

from roster_guardian.cli import main

sys.exit(main())
