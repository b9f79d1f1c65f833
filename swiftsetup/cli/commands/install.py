"""
Install command implementation.

Installs the requested Swift version on the current machine and exports it
to the calling job.
"""

import logging

from swiftsetup.cli.utils import load_setup_config
from swiftsetup.core.exceptions import ConfigError
from swiftsetup.core.platform import detect_system
from swiftsetup.toolchain.installer import SwiftInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)

    Raises:
        SwiftSetupError: If any installation stage fails
    """
    config = load_setup_config(
        args,
        swift_version=args.swift_version,
        tool_cache_dir=args.tool_cache_dir,
        install_dir=args.install_dir,
        keyserver=args.keyserver,
        skip_build_tools=args.skip_build_tools,
    )

    if not config.swift_version:
        raise ConfigError(
            "No Swift version given: use --swift-version, the swift-version "
            "input or swift_version in the configuration file"
        )

    system = detect_system()
    logger.debug(f"Detected system: {system}")

    installer = SwiftInstaller.from_config(config)
    result = installer.install(config.swift_version, system)

    source = "cache" if result.was_cached else "download"
    logger.info(
        f"Installed Swift {result.package.version} from {source} to {result.bin_dir}"
    )
    return 0
