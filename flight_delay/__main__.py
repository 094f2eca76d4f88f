import sys

from flight_delay.cli import main

sys.exit(main())
