import sys

from relay_tunnel.cli import main

sys.exit(main())
