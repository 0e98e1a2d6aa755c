"""
GCE Ops - Progress Tracking

Provides visual progress feedback while a batch of operations is drained.
"""

import sys

from tqdm import tqdm


class ProgressTracker:
    """
    Track progress of a batch wait with a tqdm bar.

    Example:
        tracker = ProgressTracker(total_steps=5, desc="Waiting")
        tracker.start()

        tracker.update_step("Delete instance a")
        # ... wait ...
        tracker.advance()

        tracker.finish()
    """

    def __init__(self, total_steps: int, desc: str = "Operations", file=None):
        """
        Initialize progress tracker.

        Args:
            total_steps: Number of operations in the batch
            desc: Description shown in front of the bar
            file: Stream to draw on (default: stderr)
        """
        self.total_steps = total_steps
        self.current_step = 0
        self.desc = desc
        self.file = file or sys.stderr
        self.bar = None

    def start(self):
        """Start the progress bar."""
        self.current_step = 0
        self.bar = tqdm(
            total=self.total_steps,
            desc=self.desc,
            bar_format='{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}]',
            ncols=80,
            file=self.file,
            leave=False
        )

    def update_step(self, step_name: str):
        """Show the name of the operation currently waited on."""
        if self.bar:
            self.bar.set_description(f"{self.desc} - {step_name}")

    def advance(self, steps: int = 1):
        """Advance the progress by one or more operations."""
        self.current_step += steps
        if self.bar:
            self.bar.update(steps)

    def finish(self):
        """Close the progress bar."""
        if self.bar:
            self.bar.close()
            self.bar = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
        return False


class SimpleProgressTracker:
    """
    Progress tracker without any output.

    Used when progress is disabled or output is not a terminal.
    """

    def __init__(self, total_steps: int = 0, desc: str = "Operations"):
        self.total_steps = total_steps
        self.current_step = 0

    def start(self):
        pass

    def update_step(self, step_name: str):
        pass

    def advance(self, steps: int = 1):
        self.current_step += steps

    def finish(self):
        pass

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
        return False


def create_progress_tracker(total_steps: int, desc: str = "Operations",
                            enabled: bool = True):
    """
    Factory function to create appropriate progress tracker.

    Args:
        total_steps: Number of operations in the batch
        desc: Description of the batch
        enabled: Whether to show progress at all

    Returns:
        ProgressTracker or SimpleProgressTracker instance
    """
    if not enabled or total_steps < 2:
        return SimpleProgressTracker(total_steps, desc)
    return ProgressTracker(total_steps, desc)
