"""Allow running as: python -m src.tracker"""

from src.tracker.cli import main

main()
