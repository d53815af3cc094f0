import sys

from restdoc.cli import main

sys.exit(main())
