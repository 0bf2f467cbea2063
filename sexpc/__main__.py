import sys

from sexpc.main import main

sys.exit(main())
