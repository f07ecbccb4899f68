"""Entry point for `python -m cybersec_monitor`."""

from .app import main

if __name__ == "__main__":
    main()
