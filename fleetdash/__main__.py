"""Allow `python -m fleetdash`."""

from fleetdash.cli import main

if __name__ == "__main__":
    main()
