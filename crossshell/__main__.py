"""
Entry point for running crossshell CLI as a module.

Usage: python -m crossshell [command] [options]
"""

from crossshell.cli.parser import main

if __name__ == "__main__":
    main()
