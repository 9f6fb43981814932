import sys

from dbconsole.console import main

sys.exit(main())
