import sys

from wpaswitch.cli import main

sys.exit(main())
