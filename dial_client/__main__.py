import sys

from dial_client.cli.app import main

if __name__ == "__main__":
    sys.exit(main())
