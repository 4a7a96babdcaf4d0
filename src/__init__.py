"""
Cloud Functions Fleet Tool.
"""

from clients import CloudFunctionsRestClient
from config import FleetConfig
from deployer import DeployOptions, FunctionDeployer
from log_utils import setup_logging
from models import FunctionRecord, TriggerKind

__all__ = [
    "CloudFunctionsRestClient",
    "FleetConfig",
    "DeployOptions",
    "FunctionDeployer",
    "setup_logging",
    "FunctionRecord",
    "TriggerKind",
]
