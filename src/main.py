"""
Main entry point for the Bakery Cost Tracker application.

This module reports the active configuration and hands the command line
over to the cost CLI.
"""

import sys
import traceback

from src.utils import cost_cli


def main(argv=None):
    """
    Main application entry point.

    Runs one CLI command and exits with its status code.
    """
    try:
        status = cost_cli.main(argv)
    except Exception as e:
        print(f"ERROR: Application crashed: {e}")
        traceback.print_exc()
        sys.exit(1)

    sys.exit(status)


if __name__ == "__main__":
    main()
