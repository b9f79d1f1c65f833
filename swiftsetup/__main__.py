"""
Entry point for running SwiftSetup as a module.

Usage: python -m swiftsetup [command] [options]
"""

from swiftsetup.cli.parser import main

if __name__ == "__main__":
    main()
