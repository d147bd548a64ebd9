import sys

from indexnow_client.cli import main

sys.exit(main())
