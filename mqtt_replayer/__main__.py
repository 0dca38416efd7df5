import sys

from mqtt_replayer.cli import main

if __name__ == "__main__":
    sys.exit(main())
