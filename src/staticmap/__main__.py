import sys

from staticmap.cli import main

sys.exit(main())
