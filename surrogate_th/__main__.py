import sys

from surrogate_th.cli import main

sys.exit(main())
