#!/usr/bin/env python3
"""
Release download report for a GitHub repository.

Usage:
    downloads.py org/repo                  # Binary downloads per tag
    downloads.py org/repo --group minor    # Grouped by major.minor
    downloads.py org/repo --csv --debug    # CSV, matched files on stderr
"""

import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from release_downloads.cli import run

if __name__ == "__main__":
    run()
