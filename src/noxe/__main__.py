import sys

from noxe.cli import main

sys.exit(main())
