import sys

from tldr.cli import main

sys.exit(main())
