"""Main module for termfeed.

This module allows the reader to be run as a Python module using:
python -m termfeed

It delegates to the terminal application's main function.
"""

from termfeed.tui.app import main

if __name__ == "__main__":
    main()
