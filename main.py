# main.py
import sys

from trackgeo.app.cli import main

if __name__ == "__main__":
    sys.exit(main())
