"""
Resolve command implementation.

Shows which package a version request resolves to, for this machine or for
an explicitly given platform.
"""

import dataclasses
import logging

from swiftsetup.core.platform import System, detect_system
from swiftsetup.toolchain.versions import default_registry

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    system = detect_system()
    if args.os_name:
        system = System(os=args.os_name, version=args.os_version or "", arch=system.arch)
    elif args.os_version:
        system = dataclasses.replace(system, version=args.os_version)
    if args.arch:
        system = dataclasses.replace(system, arch=args.arch)

    logger.debug(f"Resolving {args.swift_version} for {system}")
    package = default_registry().resolve(args.swift_version, system)

    print(f"Version:   {package.version}")
    print(f"Platform:  {system}")
    print(f"Package:   {package.name}")
    print(f"URL:       {package.url}")
    print(f"Signature: {package.signature_url}")
    return 0
