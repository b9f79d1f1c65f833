"""
Entry point for running SwiftSetup CLI as a module.

Usage: python -m swiftsetup.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
