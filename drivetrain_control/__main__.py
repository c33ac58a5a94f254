"""
Main entry point when running the drivetrain_control module with python -m.
"""

import logging
import sys

from .cli import main

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)
