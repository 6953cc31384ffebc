import sys

from hkpclient.cli import main

sys.exit(main())
