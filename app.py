import sys

from loopr.main import run

if __name__ == "__main__":
    sys.exit(run())
