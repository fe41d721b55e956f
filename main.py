"""
main.py — Entry point.

Run with:
    python main.py [--difficulty easy|normal|hard] [--obstacles on|off]
                   [--mute] [--data-dir DIR] [--loglevel LEVEL]

Requires:
    pip install pygame
"""

from gridsnake.cli import main


if __name__ == "__main__":
    main()
