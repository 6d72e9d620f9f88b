import sys

from tsc_audit.cli import main

sys.exit(main())
