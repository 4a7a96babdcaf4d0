"""
Deploy subcommand: builds and runs the gcloud deployment for a function.

Functions are deployed as 2nd gen (--gen2). The describe and list commands
read the Cloud Functions v1 API, which does not report 2nd-gen functions, so
a function deployed here will not show up in them.
"""

import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional

from config import FleetConfig

logger = logging.getLogger(__name__)

RUNTIME = "python312"
ENTRY_POINT = "handle_request"
DEFAULT_SOURCE = "./cloud_function"


@dataclass
class DeployOptions:
    """Options accepted after the function name of the deploy command."""

    environment: str = "prod"
    version: str = ""
    clean: bool = False
    source: str = DEFAULT_SOURCE


def parse_deploy_options(options: List[str]) -> DeployOptions:
    """
    Parse trailing deploy options (-e ENV, -v VERSION, -c, -s SOURCE).

    Unknown tokens and flags missing their value are ignored.
    """
    opts = DeployOptions()
    for i, opt in enumerate(options):
        has_value = i + 1 < len(options)
        if opt == "-e" and has_value:
            opts.environment = options[i + 1]
        elif opt == "-v" and has_value:
            opts.version = options[i + 1]
        elif opt == "-c":
            opts.clean = True
        elif opt == "-s" and has_value:
            opts.source = options[i + 1]
    return opts


def build_clean_command() -> List[str]:
    """Command that purges the local package cache before a rebuild."""
    return [sys.executable, "-m", "pip", "cache", "purge"]


def build_deploy_command(
    config: FleetConfig, function_name: str, opts: DeployOptions
) -> List[str]:
    """Build the gcloud command line that deploys function_name."""
    cmd = [
        "gcloud",
        "functions",
        "deploy",
        function_name,
        "--gen2",
        f"--runtime={RUNTIME}",
        f"--region={config.region}",
        f"--source={opts.source}",
        f"--entry-point={ENTRY_POINT}",
        "--trigger-http",
        "--allow-unauthenticated",
        f"--project={config.project_id}",
    ]

    labels = []
    if opts.environment:
        labels.append(f"environment={opts.environment}")
    if opts.version:
        labels.append(f"version={opts.version}")
    if labels:
        cmd.append(f"--update-labels={','.join(labels)}")

    return cmd


def build_url_command(config: FleetConfig, function_name: str) -> List[str]:
    """Build the gcloud command line that prints a function's URL."""
    return [
        "gcloud",
        "functions",
        "describe",
        function_name,
        f"--region={config.region}",
        f"--project={config.project_id}",
        "--format=value(serviceConfig.uri)",
    ]


class FunctionDeployer:
    """Deploys a function by shelling out to gcloud."""

    def __init__(
        self,
        config: FleetConfig,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.config = config
        self.runner = runner

    def _clean(self, opts: DeployOptions) -> None:
        print("🧹 Cleaning and rebuilding...")
        try:
            self.runner(build_clean_command(), cwd=opts.source, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning(f"Clean failed: {e}")

    def _lookup_url(self, function_name: str) -> Optional[str]:
        try:
            result = self.runner(
                build_url_command(self.config, function_name),
                capture_output=True,
                text=True,
                check=True,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            logger.debug(f"Could not look up URL for {function_name}: {e}")
            return None
        return (result.stdout or "").strip() or None

    def deploy(self, function_name: str, options: List[str]) -> Optional[str]:
        """
        Deploy a function and report its URL.

        Args:
            function_name: Function ID to deploy
            options: Trailing command-line options (-e, -v, -c, -s)

        Returns:
            The deployed function URL if it could be looked up, else None

        Raises:
            RuntimeError: If the gcloud deployment fails
        """
        print(
            f"🚀 Deploying function '{function_name}' to project "
            f"'{self.config.project_id}'..."
        )
        opts = parse_deploy_options(options)
        logger.debug(f"Deploy options: {opts}")

        if opts.clean:
            self._clean(opts)

        cmd = build_deploy_command(self.config, function_name, opts)
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            self.runner(cmd, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise RuntimeError(f"❌ Deployment failed: {e}") from e

        print(f"✅ Function '{function_name}' deployed successfully!")

        url = self._lookup_url(function_name)
        if url:
            print(f"🌐 Function URL: {url}")
        return url
