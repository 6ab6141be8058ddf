"""
Entry point for running crossshell CLI as a module.

Usage: python -m crossshell.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
