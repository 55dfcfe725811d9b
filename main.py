#!/usr/bin/env python
# main.py
#
# Runs dipse from a source checkout. Installed copies use the `dipse`
# console script instead.

from dipse.cli import main

if __name__ == "__main__":
    main()
