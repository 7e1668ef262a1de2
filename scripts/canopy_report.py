# -*- coding: utf-8 -*-
"""This script writes the canopy report for a tree inventory.

See `python scripts/canopy_report.py --help` for the inputs it accepts.
"""
import sys

from urbancanopy.report import main

if __name__ == "__main__":
    sys.exit(main())
