"""
Swift installation orchestrator.

Drives one installation through every stage in order:

    platform check -> resolve -> cache lookup -> fetch & verify -> cache insert
    -> run installer -> locate -> post-install -> outputs

A cache hit skips fetch, verification and insert. Every stage raises on
failure, and no later stage runs after a failure.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from swiftsetup.config.settings import SetupConfig
from swiftsetup.core.download import HttpTransport
from swiftsetup.core.environment import ActionsEnvironment
from swiftsetup.core.exceptions import UnsupportedPlatformError
from swiftsetup.core.interfaces import EnvironmentWriter, ProcessRunner, Transport
from swiftsetup.core.platform import System, is_supported_system
from swiftsetup.core.process import SubprocessRunner
from swiftsetup.core.tool_cache import ToolCache
from swiftsetup.core.verification import GpgKeyring
from swiftsetup.toolchain.cache_gate import CacheGate
from swiftsetup.toolchain.fetch import FetchVerifyPipeline, discard
from swiftsetup.toolchain.locator import PostInstallLocator
from swiftsetup.toolchain.runner import InstallerRunner
from swiftsetup.toolchain.strategies import create_strategy
from swiftsetup.toolchain.strategy import InstallStrategy
from swiftsetup.toolchain.versions import Package, SwiftVersionRegistry, default_registry

logger = logging.getLogger(__name__)

StrategyFactory = Callable[[System], InstallStrategy]


@dataclass
class InstallResult:
    """Outcome of a successful installation."""

    package: Package
    installer_path: Path
    was_cached: bool
    exit_code: int
    bin_dir: Path
    path_entries: List[Path] = field(default_factory=list)


class SwiftInstaller:
    """
    Installs Swift on the current machine.

    Example:
        >>> installer = SwiftInstaller.from_config(load_config())
        >>> result = installer.install("5.6", detect_system())
        >>> print(result.bin_dir)
    """

    def __init__(
        self,
        registry: SwiftVersionRegistry,
        tool_cache: ToolCache,
        pipeline: FetchVerifyPipeline,
        runner: InstallerRunner,
        environment: EnvironmentWriter,
        strategy_factory: StrategyFactory,
    ):
        self.registry = registry
        self.tool_cache = tool_cache
        self.pipeline = pipeline
        self.runner = runner
        self.environment = environment
        self.strategy_factory = strategy_factory

    @classmethod
    def from_config(
        cls,
        config: SetupConfig,
        environment: Optional[EnvironmentWriter] = None,
        process_runner: Optional[ProcessRunner] = None,
        transport: Optional[Transport] = None,
        registry: Optional[SwiftVersionRegistry] = None,
    ) -> "SwiftInstaller":
        """
        Wire an installer with real collaborators unless replacements are given.
        """
        process_runner = process_runner or SubprocessRunner()
        transport = transport or HttpTransport(
            temp_dir=config.temp_dir, timeout=config.download_timeout
        )
        keyring = GpgKeyring(
            process_runner,
            transport,
            keys_url=config.keys_url,
            keyserver=config.keyserver,
            homedir=config.gnupg_home,
        )

        return cls(
            registry=registry or default_registry(),
            tool_cache=ToolCache(config.tool_cache_dir),
            pipeline=FetchVerifyPipeline(transport, keyring),
            runner=InstallerRunner(process_runner),
            environment=environment or ActionsEnvironment.from_environ(),
            strategy_factory=lambda system: create_strategy(
                system, config, process_runner
            ),
        )

    def install(self, version: str, system: System) -> InstallResult:
        """
        Install a Swift version.

        Args:
            version: Requested version ("5.6.1", "5.6", "5" or "latest")
            system: Target system

        Returns:
            InstallResult describing the installed toolchain

        Raises:
            SwiftSetupError: Subclass naming the stage that failed
        """
        if not is_supported_system(system):
            raise UnsupportedPlatformError(system.os)

        package = self.registry.resolve(version, system)
        logger.info(f"Installing Swift {package.version} on {system}")

        strategy = self.strategy_factory(system)
        gate = CacheGate(self.tool_cache, system)

        installer_path = gate.lookup(package)
        was_cached = installer_path is not None
        if installer_path is None:
            download = self.pipeline.fetch_and_verify(package)
            try:
                installer_path = gate.insert(download.installer_path, package)
            finally:
                discard(download)
        else:
            logger.info(f"Using cached installer {installer_path}")

        strategy.prepare()
        exit_code = self.runner.run(strategy.installer_command(installer_path))

        locator = PostInstallLocator(self.environment)
        bin_dir = strategy.bin_dir()
        registered = locator.locate(exit_code, bin_dir, strategy.auxiliary_dirs())

        strategy.post_install(package, self.environment)

        self.environment.set_output("version", package.version)
        self.environment.set_output("path", str(bin_dir))

        logger.info(f"Swift {package.version} is ready")
        return InstallResult(
            package=package,
            installer_path=installer_path,
            was_cached=was_cached,
            exit_code=exit_code,
            bin_dir=bin_dir,
            path_entries=registered,
        )


__all__ = [
    "InstallResult",
    "SwiftInstaller",
]
