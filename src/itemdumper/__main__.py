import sys

from itemdumper.cli import main

sys.exit(main())
