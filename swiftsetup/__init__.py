"""
SwiftSetup - install the Swift toolchain on CI runners.

Resolves a requested Swift version, reuses or downloads and verifies the
installer, runs it, and exports the toolchain to the calling job.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("swiftsetup")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
