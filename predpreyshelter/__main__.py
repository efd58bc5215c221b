import sys

from predpreyshelter.main import main

sys.exit(main())
