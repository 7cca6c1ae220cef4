import sys

from debdep.cli import main

sys.exit(main())
