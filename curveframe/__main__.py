import sys

from curveframe.run import main

sys.exit(main())
