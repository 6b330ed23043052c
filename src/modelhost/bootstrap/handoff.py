"""Handoff to the downstream executable."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, NoReturn, Sequence

from modelhost.errors import LaunchError
from modelhost.models.config import LaunchConfig


logger = logging.getLogger(__name__)


@dataclass
class LaunchPlan:
    """Everything needed to exec the downstream binary."""
    executable: Path
    argv: List[str]
    env: Dict[str, str] = field(default_factory=dict)


def prepend_path(entry: str, previous: str = "") -> str:
    """Prepend a search path entry, keeping any prior value."""
    if not previous:
        return entry
    return f"{entry}{os.pathsep}{previous}"


def build_launch_plan(
    config: LaunchConfig,
    home: Path,
    args: Sequence[str],
    environ: Mapping[str, str],
) -> LaunchPlan:
    """Compute the command line and environment for the downstream binary."""
    executable = home / config.executable
    argv = [
        str(executable),
        config.config_flag,
        str(home / config.config_file),
        *args,
    ]

    env = dict(environ)
    env[config.library_path_var] = prepend_path(
        str(home / config.library_dir),
        environ.get(config.library_path_var, ""),
    )

    return LaunchPlan(executable=executable, argv=argv, env=env)


def verify_executable(path: Path) -> None:
    """Fail with a remediation hint unless the binary can be executed."""
    if not path.is_file():
        raise LaunchError(f"{path.name} binary not found at {path}")
    if not os.access(path, os.X_OK):
        raise LaunchError(
            f"{path.name} binary is not executable",
            hint=f"Run: chmod +x {path}",
        )


def handoff(plan: LaunchPlan) -> NoReturn:
    """Replace the current process with the downstream binary."""
    verify_executable(plan.executable)
    logger.info(f"Starting {plan.executable.name}...")

    # exec discards Python's buffers
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        os.execve(str(plan.executable), plan.argv, plan.env)
    except OSError as e:
        raise LaunchError(f"Failed to execute {plan.executable}: {e}") from e
