"""
Entry point for running the allow-list builder as a module.

Usage:
    python -m allowlist [command] [options]

Example:
    python -m allowlist root 0x1111111111111111111111111111111111111111:1 0x2222222222222222222222222222222222222222:2
    python -m allowlist proof --entries-file honoraries.txt --input 0x1111111111111111111111111111111111111111:1
"""

from allowlist.cli import cli

if __name__ == "__main__":
    cli()
