"""
Convenience entry point for running gcalslots directly.

Usage: python -m gcalslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
