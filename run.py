#!/usr/bin/env python3
"""
SLUDGE SWEEP Launcher
======================
Run this script to start the game.
"""

from sludge_sweep.main import main

if __name__ == "__main__":
    main()
