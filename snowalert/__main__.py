import sys

from snowalert.cli import main

sys.exit(main())
