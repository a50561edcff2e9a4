#!/usr/bin/env python3
"""
Text Analysis Pipeline - Main Entry Point

Runs a single pipeline action described by a JSON document and prints the
result as one JSON line.

Usage:
    python main.py --input '{"action": "Analyze", "text": "Hello world."}'
"""

import sys
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from text_analysis.cli import main as cli_main


def main() -> int:
    """Console entry point."""
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
