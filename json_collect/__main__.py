import sys

from json_collect.cli import main

sys.exit(main())
