#!/usr/bin/env python3
"""
SLICE_VOID Launcher
====================
Run this script to start the game.
"""

from slice_void.main import main

if __name__ == "__main__":
    main()
