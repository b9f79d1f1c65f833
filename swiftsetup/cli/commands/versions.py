"""
Versions command implementation.

Lists the Swift releases known to the catalogue.
"""

from swiftsetup.core.platform import SUPPORTED_OS
from swiftsetup.toolchain.versions import default_registry


def run(args) -> int:
    """
    Run the versions command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    registry = default_registry()

    for version in registry.list_versions():
        print(version)

    if args.platforms:
        print()
        for os_name in SUPPORTED_OS:
            platform_versions = ", ".join(registry.list_platform_versions(os_name))
            print(f"{os_name}: {platform_versions}")

    return 0
