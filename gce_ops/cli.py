"""
GCE Ops - gcloud-style Command Line Interface

Usage:
    gce-ops remove-instance vm-1 vm-2 vm-3 --zone=us-central1-a
    gce-ops get-instance my-vm --zone=us-central1-a --format=json
    gcloud compute instances list --format='value(name)' | gce-ops stop-instance - --zone=us-central1-a

Mutating commands start every operation first and wait for all of them
at the end. One failure is reported as-is; several are reported together.
"""

import argparse
import csv
import io
import json
import signal
import subprocess
import sys
import traceback
from typing import Any, Dict, Iterable, List, Optional

import yaml
from googleapiclient.errors import HttpError

from gce_ops.commands import COMMANDS
from gce_ops.core.config import VERSION, CommandConfig, create_wait_config
from gce_ops.core.exceptions import GCEOpsError
from gce_ops.main import run_command
from gce_ops.operations.waiter import StopSignal

ZONAL_COMMANDS = {
    'get-instance', 'remove-instance', 'start-instance', 'stop-instance',
    'restart-instance', 'get-disk', 'remove-disk', 'resize-disk',
    'resize-instance-group', 'wait-instance-group',
}

REGIONAL_COMMANDS = {
    'add-target-pool-instance', 'remove-target-pool-instance',
}

COMMAND_HELP = {
    'get-instance': 'Describe instances.',
    'remove-instance': 'Delete instances.',
    'start-instance': 'Start stopped instances.',
    'stop-instance': 'Stop running instances.',
    'restart-instance': 'Reset instances.',
    'get-disk': 'Describe disks.',
    'remove-disk': 'Delete disks.',
    'resize-disk': 'Grow disks to a new size.',
    'remove-image': 'Delete images.',
    'remove-snapshot': 'Delete snapshots.',
    'add-target-pool-instance': 'Add instances to target pools.',
    'remove-target-pool-instance': 'Remove instances from target pools.',
    'resize-instance-group': 'Set the target size of managed instance groups.',
    'wait-instance-group': 'Wait until managed instance groups are stable.',
}

EXIT_CANCELLED = 130  # Standard exit code for SIGINT


class OutputFormatter:
    """
    Handle output formatting similar to gcloud.

    Supports: json, yaml, table, csv, value(field)
    """

    @staticmethod
    def format_output(data: Dict[str, Any], format_type: str = 'table') -> str:
        """Format one result object based on format type."""
        if format_type == 'json':
            return json.dumps(data, indent=2)
        elif format_type == 'yaml':
            return yaml.safe_dump(data, default_flow_style=False).rstrip('\n')
        elif format_type == 'table':
            return OutputFormatter._format_table(data)
        elif format_type == 'csv':
            return OutputFormatter._format_csv(data)
        elif format_type.startswith('value(') and format_type.endswith(')'):
            # Extract specific field: value(name)
            field = format_type[6:-1]
            return str(data.get(field, ''))
        else:
            return str(data)

    @staticmethod
    def _format_table(data: Dict[str, Any]) -> str:
        """Format as a two-column table of top-level scalar fields."""
        rows = [(k, v) for k, v in data.items() if not isinstance(v, (dict, list))]
        lines = []
        lines.append("┌─" + "─" * 50 + "─┐")
        for key, value in rows:
            lines.append(f"│ {key:20} │ {str(value)[:27]:27} │")
        lines.append("└─" + "─" * 50 + "─┘")
        return "\n".join(lines)

    @staticmethod
    def _format_csv(data: Dict[str, Any]) -> str:
        """Format as CSV."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow(data.keys())
        writer.writerow(data.values())
        return buffer.getvalue().rstrip('\n')


def get_gcloud_config(key: str) -> Optional[str]:
    """
    Read configuration from gcloud config.

    Args:
        key: Config key (e.g., 'core/project', 'compute/zone')

    Returns:
        Config value or None
    """
    try:
        result = subprocess.run(
            ['gcloud', 'config', 'get-value', key],
            capture_output=True,
            text=True,
            timeout=5
        )
        value = result.stdout.strip()
        return value if value and value != '(unset)' else None
    except (subprocess.SubprocessError, FileNotFoundError):
        # gcloud not available or error
        return None


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser with one subcommand per verb-noun command.

    Returns:
        Configured ArgumentParser
    """

    parser = argparse.ArgumentParser(
        prog='gce-ops',
        description='Batch Google Compute Engine operations',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To delete several instances, waiting for all of them at the end:
        $ gce-ops remove-instance vm-1 vm-2 vm-3 --zone=us-central1-a

    To stop every instance listed by gcloud:
        $ gcloud compute instances list --format='value(name)' \\
            | gce-ops stop-instance - --zone=us-central1-a

NOTES
    Press Ctrl-C once to stop waiting; operations already started keep
    running on the server.
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'gce-ops v{VERSION}'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Available commands'
    )

    for command_name in COMMANDS:
        subparser = subparsers.add_parser(
            command_name,
            help=COMMAND_HELP.get(command_name),
            description=COMMAND_HELP.get(command_name)
        )
        _add_common_args(subparser, command_name)
        _add_command_args(subparser, command_name)

    return parser


def _add_common_args(parser: argparse.ArgumentParser, command_name: str):
    """Add arguments common to all commands (gcloud style)."""

    positional = parser.add_argument_group('POSITIONAL ARGUMENTS')
    positional.add_argument(
        'names',
        metavar='NAME',
        nargs='*',
        help="Resource names. Use '-' (or nothing) to read names from stdin, one per line."
    )

    location = parser.add_argument_group('LOCATION FLAGS')
    location.add_argument(
        '--project',
        metavar='PROJECT',
        help='GCP project ID. Defaults to gcloud config project.'
    )
    if command_name in ZONAL_COMMANDS:
        location.add_argument(
            '--zone',
            metavar='ZONE',
            help='Zone of the resources. Defaults to gcloud config compute/zone.'
        )
    if command_name in REGIONAL_COMMANDS:
        location.add_argument(
            '--region',
            metavar='REGION',
            help='Region of the resources. Defaults to gcloud config compute/region.'
        )

    output = parser.add_argument_group('OUTPUT FLAGS')
    output.add_argument(
        '--format',
        metavar='FORMAT',
        default='table',
        help='Output format. One of: json, yaml, table, csv, value(FIELD), disable. Default: table'
    )
    output.add_argument(
        '--verbosity',
        metavar='VERBOSITY',
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        default='info',
        help='Logging verbosity. One of: debug, info, warning, error, critical. Default: info'
    )
    output.add_argument(
        '--log-file',
        metavar='LOG_FILE',
        help='Write logs to this file.'
    )
    output.add_argument(
        '--no-progress',
        action='store_true',
        help='Do not show a progress bar while waiting.'
    )

    wait = parser.add_argument_group('WAIT FLAGS')
    wait.add_argument(
        '--poll-interval',
        type=float,
        metavar='SECONDS',
        help='Seconds between operation status checks. Default: 0.15'
    )
    wait.add_argument(
        '--poll-backoff',
        type=float,
        metavar='FACTOR',
        help='Multiply the interval by this after every check. Default: 1.0 (constant)'
    )
    wait.add_argument(
        '--max-poll-interval',
        type=float,
        metavar='SECONDS',
        help='Upper bound for the interval when backing off. Default: 5'
    )
    wait.add_argument(
        '--separate-callback-errors',
        action='store_true',
        help='Report errors raised after an operation succeeded separately from operation failures.'
    )


def _add_command_args(parser: argparse.ArgumentParser, command_name: str):
    """Add command-specific arguments."""

    group = parser.add_argument_group('COMMAND FLAGS')

    if command_name == 'resize-disk':
        group.add_argument('--size', type=int, required=True, metavar='GB',
                           help='New size of the disks in GB.')
    elif command_name == 'resize-instance-group':
        group.add_argument('--size', type=int, required=True, metavar='SIZE',
                           help='New target size of the groups.')
    elif command_name in REGIONAL_COMMANDS:
        group.add_argument('--instance', action='append', required=True,
                           metavar='INSTANCE_URL', dest='instances',
                           help='Instance link. May be repeated.')
    elif command_name == 'wait-instance-group':
        group.add_argument('--timeout', type=float, metavar='SECONDS',
                           help='Give up (with a warning) after this many seconds.')


def validate_args(args: argparse.Namespace) -> bool:
    """
    Validate arguments (gcloud-style validation).

    Returns:
        True if valid, False with error message
    """

    if getattr(args, 'size', None) is not None and args.size < 0:
        print("ERROR: (gce-ops) Invalid value:", file=sys.stderr)
        print("  --size must not be negative", file=sys.stderr)
        return False

    for flag in ('poll_interval', 'max_poll_interval', 'timeout'):
        value = getattr(args, flag, None)
        if value is not None and value <= 0:
            print("ERROR: (gce-ops) Invalid value:", file=sys.stderr)
            print(f"  --{flag.replace('_', '-')} must be positive", file=sys.stderr)
            return False

    if args.poll_backoff is not None and args.poll_backoff < 1.0:
        print("ERROR: (gce-ops) Invalid value:", file=sys.stderr)
        print("  --poll-backoff must be at least 1.0", file=sys.stderr)
        return False

    return True


def args_to_config(args: argparse.Namespace) -> CommandConfig:
    """Convert arguments to CommandConfig."""
    wait_kwargs = {}
    if args.poll_interval is not None:
        wait_kwargs['poll_interval'] = args.poll_interval
        wait_kwargs['group_poll_interval'] = args.poll_interval
    if args.poll_backoff is not None:
        wait_kwargs['backoff_multiplier'] = args.poll_backoff
    if args.max_poll_interval is not None:
        wait_kwargs['max_poll_interval'] = args.max_poll_interval

    return CommandConfig(
        wait=create_wait_config(**wait_kwargs),
        log_level=args.verbosity.upper(),
        log_file=args.log_file,
        output_format=args.format,
        show_progress=not args.no_progress and sys.stderr.isatty(),
        wrap_callback_errors=args.separate_callback_errors,
    )


def args_to_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Command-specific keyword arguments for the command class."""
    options = {}
    if args.command == 'resize-disk':
        options['size_gb'] = args.size
    elif args.command == 'resize-instance-group':
        options['size'] = args.size
    elif args.command in REGIONAL_COMMANDS:
        options['instances'] = args.instances
    elif args.command == 'wait-instance-group':
        options['timeout'] = args.timeout
    return options


def read_items(names: List[str], stdin=None) -> Iterable[str]:
    """
    Yield pipeline items from the command line or stdin.

    '-' or no names at all reads names from stdin, one per line,
    skipping blank lines.
    """
    if names and names != ['-']:
        for name in names:
            yield name
        return

    stdin = stdin or sys.stdin
    for line in stdin:
        name = line.strip()
        if name:
            yield name


def make_emitter(format_type: str):
    """Return a function that prints result objects in the given format."""
    def emit(obj):
        if format_type == 'disable':
            return
        print(OutputFormatter.format_output(obj, format_type), flush=True)
    return emit


def install_stop_handler(stop: StopSignal):
    """
    Make the first Ctrl-C request a stop instead of raising.

    A second Ctrl-C falls back to the default handler.

    Returns:
        The previous SIGINT handler
    """
    def handler(signum, frame):
        print("\nStopping... (press Ctrl-C again to abort)", file=sys.stderr)
        stop.request_stop()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    return signal.signal(signal.SIGINT, handler)


def handle_command(args: argparse.Namespace) -> int:
    """Run the parsed command."""

    project = args.project or get_gcloud_config('core/project')
    zone = getattr(args, 'zone', None)
    region = getattr(args, 'region', None)
    if args.command in ZONAL_COMMANDS and not zone:
        zone = get_gcloud_config('compute/zone')
    if args.command in REGIONAL_COMMANDS and not region:
        region = get_gcloud_config('compute/region')

    config = args_to_config(args)
    stop = StopSignal()
    previous_handler = install_stop_handler(stop)

    try:
        run_command(
            args.command,
            read_items(args.names),
            project=project,
            zone=zone,
            region=region,
            config=config,
            options=args_to_options(args),
            emit=make_emitter(config.output_format),
            stop=stop
        )
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if stop.stop_requested:
        print("Stopped waiting. Operations already started keep running.", file=sys.stderr)
        return EXIT_CANCELLED

    return 0


def main(argv: List[str] = None) -> int:
    """Main CLI entry point."""

    parser = create_parser()
    args = parser.parse_args(argv)

    if not validate_args(args):
        return 1

    try:
        return handle_command(args)

    except GCEOpsError as e:
        print(f"ERROR: (gce-ops) {e}", file=sys.stderr)
        return 1
    except HttpError as e:
        print(f"ERROR: (gce-ops) API request failed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        return EXIT_CANCELLED
    except Exception as e:
        print(f"ERROR: (gce-ops) Unexpected error: {e}", file=sys.stderr)
        if args.verbosity == 'debug':
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
