"""
Describe and list subcommands: fetch function metadata and print reports.
"""

import json
import logging
import sys
from typing import List, Optional, TextIO

from clients import CloudFunctionsRestClient
from config import FleetConfig
from models import FunctionRecord, TriggerKind, format_rfc3339

logger = logging.getLogger(__name__)

ROW_FORMAT = "%-20s %-10s %-10s %-8s %-10s %s"
RULE_WIDTH = 90


def format_details(record: FunctionRecord) -> str:
    """Render the describe report for a single function."""
    lines = [
        "📋 Function Details:",
        f"Name: {record.name}",
        f"Status: {record.status}",
        f"Runtime: {record.runtime}",
        f"Trigger: {record.trigger.value}",
        f"Last Updated: {format_rfc3339(record.update_time)}",
    ]
    if record.version:
        lines.append(f"Version: {record.version}")
    if record.trigger is TriggerKind.HTTPS and record.url:
        lines.append(f"URL: {record.url}")
    if record.source:
        lines.append(f"Source: {record.source}")
    return "\n".join(lines)


def format_table(records: List[FunctionRecord]) -> str:
    """Render records as a fixed-width table, in the order given."""
    lines = [
        ROW_FORMAT
        % ("NAME", "STATUS", "RUNTIME", "TRIGGER", "VERSION", "LAST UPDATED"),
        "-" * RULE_WIDTH,
    ]
    for rec in records:
        updated = (
            rec.update_time.strftime("%Y-%m-%d %H:%M") if rec.update_time else "n/a"
        )
        lines.append(
            ROW_FORMAT
            % (
                rec.name,
                rec.status,
                rec.runtime,
                rec.trigger.value,
                rec.version or "n/a",
                updated,
            )
        )
    return "\n".join(lines)


def describe_function(
    config: FleetConfig,
    client: CloudFunctionsRestClient,
    function_name: str,
    out: Optional[TextIO] = None,
) -> FunctionRecord:
    """
    Fetch a single function and print its details.

    Args:
        config: Fleet configuration
        client: Open Cloud Functions client
        function_name: Function ID (short name)
        out: Stream the report is written to

    Returns:
        The projected FunctionRecord

    Raises:
        RuntimeError: If the function cannot be fetched
    """
    if out is None:
        out = sys.stdout
    path = config.function_path(function_name)
    logger.debug(f"Describing {path}")
    record = FunctionRecord.from_api(client.get_function(path))

    if config.output == "json":
        print(json.dumps(record.to_dict(), indent=2), file=out)
    else:
        print(format_details(record), file=out)
    return record


def list_functions(
    config: FleetConfig,
    client: CloudFunctionsRestClient,
    out: Optional[TextIO] = None,
) -> List[FunctionRecord]:
    """
    List all functions in the configured project/region and print a table.

    Records keep the API's iteration order.

    Raises:
        RuntimeError: If any page of the listing fails
    """
    if out is None:
        out = sys.stdout
    records = [
        FunctionRecord.from_api(item) for item in client.iter_functions(config.parent)
    ]
    logger.debug(f"Found {len(records)} function(s) in {config.parent}")

    if config.output == "json":
        print(json.dumps([r.to_dict() for r in records], indent=2), file=out)
        return records

    if not records:
        print(
            f"No functions found in project '{config.project_id}' "
            f"region '{config.region}'",
            file=out,
        )
        return records

    print(f"📦 Cloud Functions in project '{config.project_id}':\n", file=out)
    print(format_table(records), file=out)
    return records
