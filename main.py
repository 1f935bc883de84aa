#!/usr/bin/env python3
"""Pomoflow entry point.

Run with:
    python main.py
    python -m pomoflow
"""

from pomoflow.__main__ import main


if __name__ == "__main__":
    main()
