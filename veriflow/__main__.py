import sys

from veriflow.cli import main

sys.exit(main())
