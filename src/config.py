"""
Configuration management for the Cloud Functions Fleet Tool.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_REGION = "us-central1"
PROJECT_ENV_VAR = "GCP_PROJECT_ID"


@dataclass(frozen=True)
class FleetConfig:
    """Configuration shared by every CLI subcommand."""

    project_id: str
    region: str = DEFAULT_REGION
    verbose: bool = False
    output: str = "table"

    @property
    def parent(self) -> str:
        """Resource name of the project/region that holds the functions."""
        return f"projects/{self.project_id}/locations/{self.region}"

    def function_path(self, function_name: str) -> str:
        """Full resource name for a function in this project/region."""
        return f"{self.parent}/functions/{function_name}"

    @classmethod
    def from_args(
        cls, args, environ: Optional[Mapping[str, str]] = None
    ) -> "FleetConfig":
        """
        Create configuration from command-line arguments.

        The --project flag wins over the GCP_PROJECT_ID environment variable.

        Args:
            args: Parsed argparse arguments
            environ: Environment mapping (defaults to os.environ)

        Returns:
            FleetConfig instance

        Raises:
            ValueError: If no project ID can be resolved
        """
        if environ is None:
            environ = os.environ

        project_id = args.project or environ.get(PROJECT_ENV_VAR, "")
        if not project_id:
            raise ValueError(
                f"Project ID required. Use -p flag or set {PROJECT_ENV_VAR} "
                "environment variable"
            )

        return cls(
            project_id=project_id,
            region=args.region or DEFAULT_REGION,
            verbose=getattr(args, "verbose", False),
            output=getattr(args, "output", "table"),
        )
