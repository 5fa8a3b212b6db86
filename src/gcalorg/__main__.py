import sys

from gcalorg.cli import main

sys.exit(main())
