import sys

from epreuve.cli import main

sys.exit(main())
