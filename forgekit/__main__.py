"""
Entry point for running ForgeKit CLI as a module.

Usage: python -m forgekit [command] [options]
"""

from forgekit.cli.parser import main

if __name__ == "__main__":
    main()
