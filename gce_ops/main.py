"""
GCE Ops - Main Entry Point

Programmatic entry point for running a command over a batch of items.

Usage:
    from gce_ops.main import run_command

    # Delete three instances, waiting for all of them at the end
    run_command('remove-instance', ['a', 'b', 'c'],
                project='my-project', zone='us-central1-a')
"""

from typing import Any, Callable, Dict, Iterable, Optional

from gce_ops.commands import COMMANDS
from gce_ops.core.auth import AuthManager
from gce_ops.core.config import DEFAULT_COMMAND_CONFIG, CommandConfig
from gce_ops.core.exceptions import ConfigurationError
from gce_ops.operations.waiter import StopSignal
from gce_ops.orchestration.context import CommandContext
from gce_ops.utils.logger import setup_logging


def run_command(command_name: str, items: Iterable[Any], project: str = None,
                zone: str = None, region: str = None,
                config: CommandConfig = None,
                options: Dict[str, Any] = None,
                emit: Optional[Callable[[Any], None]] = None,
                stop: StopSignal = None, compute=None, logger=None):
    """
    Run one command invocation over a stream of pipeline items.

    Args:
        command_name: Verb-noun command (e.g., 'remove-instance')
        items: Pipeline items, usually resource names
        project: GCP project ID (optional, uses credentials' project if not provided)
        zone: Zone for zonal commands
        region: Region for regional commands
        config: Optional CommandConfig
        options: Command-specific keyword arguments (e.g., {'size_gb': 50})
        emit: Sink for result objects (default: collect and return them)
        stop: Cancellation token; request_stop() abandons in-flight waits
        compute: Compute client (default: built from ADC credentials)
        logger: Logger (default: configured from config)

    Returns:
        tuple: (emitted objects or None when emit is given, DrainSummary or None)

    Raises:
        ConfigurationError: Unknown command or missing project/zone/region
        OperationFailedError: When exactly one operation failed
        AggregateOperationError: When several operations failed
    """
    command_class = COMMANDS.get(command_name)
    if command_class is None:
        raise ConfigurationError(
            f"Unknown command: {command_name}",
            fix=f"use one of: {', '.join(sorted(COMMANDS))}"
        )

    config = config or DEFAULT_COMMAND_CONFIG

    if logger is None:
        logger = setup_logging(
            level=config.log_level,
            log_file=config.log_file,
            debug=config.log_level.upper() == 'DEBUG'
        )

    if compute is None:
        compute, project = AuthManager(logger).get_client(project)
        logger.debug(f"Authenticated to project: {project}")

    context = CommandContext(emit=emit, stop=stop, logger=logger)

    command = command_class(
        compute, project, context, config, logger,
        zone=zone, region=region, **(options or {})
    )

    logger.debug(f"Running {command.name} in project {project}")
    summary = command.run(items)

    emitted = context.emitted if emit is None else None
    return emitted, summary
