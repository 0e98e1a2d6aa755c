"""
GCE Ops - Configuration Management

This module manages configuration options for GCE Ops commands.
"""

from dataclasses import dataclass, field
from typing import Optional

# Version for usage tracking
VERSION = '0.3.0'


@dataclass
class WaitConfig:
    """
    Configuration for waiting on long-running operations.

    The waiter sleeps poll_interval seconds before its first poll and
    multiplies the interval by backoff_multiplier after every poll that
    did not reach DONE, never exceeding max_poll_interval.
    A multiplier of 1.0 gives a constant interval.

    Example:
        config = WaitConfig(
            poll_interval=0.5,
            backoff_multiplier=2.0
        )
    """

    poll_interval: float = 0.15  # seconds
    backoff_multiplier: float = 1.0  # 1.0 = constant interval
    max_poll_interval: float = 5.0  # seconds

    # Managed instance group stabilization
    group_poll_interval: float = 0.15  # seconds

    def next_interval(self, current: float) -> float:
        """Interval to sleep after a poll that did not finish."""
        return min(current * self.backoff_multiplier, self.max_poll_interval)


@dataclass
class CommandConfig:
    """
    Configuration for a single command invocation.

    Example:
        config = CommandConfig(
            output_format='json',
            wrap_callback_errors=True
        )
    """

    wait: WaitConfig = field(default_factory=WaitConfig)

    # Logging settings
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    # Output settings
    output_format: str = 'table'
    show_progress: bool = True

    # Report completion handler errors as CallbackFailedError
    # instead of folding them in with operation failures
    wrap_callback_errors: bool = False

    # Seconds to wait for a managed instance group to stabilize (None = forever)
    group_wait_timeout: Optional[float] = None


# Default configurations
DEFAULT_WAIT_CONFIG = WaitConfig()
DEFAULT_COMMAND_CONFIG = CommandConfig()


def create_wait_config(**kwargs) -> WaitConfig:
    """
    Create a wait configuration with custom options.

    Args:
        **kwargs: Configuration options (any field from WaitConfig)

    Returns:
        WaitConfig: Configuration object

    Raises:
        ValueError: If an interval is not positive or the multiplier is below 1

    Example:
        config = create_wait_config(poll_interval=1.0, backoff_multiplier=1.5)
    """
    config = WaitConfig(**kwargs)

    if config.poll_interval <= 0 or config.max_poll_interval <= 0:
        raise ValueError("Poll intervals must be positive")
    if config.group_poll_interval <= 0:
        raise ValueError("Group poll interval must be positive")
    if config.backoff_multiplier < 1.0:
        raise ValueError("Backoff multiplier must be at least 1.0")
    if config.max_poll_interval < config.poll_interval:
        config.max_poll_interval = config.poll_interval

    return config


def create_command_config(**kwargs) -> CommandConfig:
    """
    Create a command configuration with custom options.

    Args:
        **kwargs: Configuration options (any field from CommandConfig)

    Returns:
        CommandConfig: Configuration object

    Example:
        config = create_command_config(
            output_format='yaml',
            log_level='DEBUG'
        )
    """
    return CommandConfig(**kwargs)
