import sys

from toolport.cli import main

sys.exit(main())
