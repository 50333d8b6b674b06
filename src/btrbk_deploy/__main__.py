# pyright: standard

"""btrbk-deploy: btrbk_deploy/__main__.py.

Declare btrbk configurations, check them with btrbk itself and deploy
them with their systemd units.
"""

import sys

from .cli.dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
