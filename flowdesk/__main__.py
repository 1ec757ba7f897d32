import sys

from flowdesk.main import main

sys.exit(main())
