import sys

from frontdoc.cli import main

sys.exit(main())
