import sys

from aicommits.cli.main import main

sys.exit(main())
