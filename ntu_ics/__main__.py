"""
Package entry point.

Allows running the application via:

    python -m ntu_ics

This simply forwards execution to ntu_ics.cli.main().
"""

from ntu_ics.cli import main

if __name__ == "__main__":
    main()
