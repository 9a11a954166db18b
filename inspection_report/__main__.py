import sys

from inspection_report.cli import main

sys.exit(main())
