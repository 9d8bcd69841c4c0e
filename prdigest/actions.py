"""GitHub Actions integration: step outputs and failure annotations.

When running inside a workflow, GITHUB_OUTPUT names a file that collects
step outputs. Multi-line values use the heredoc form:

    name<<DELIMITER
    value
    DELIMITER
"""

import os
import sys
import uuid
from pathlib import Path


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def set_output(name: str, value: str, output_file: str | None = None) -> bool:
    """Append a step output; returns False when not running under Actions."""
    path = output_file or os.environ.get("GITHUB_OUTPUT")
    if not path:
        return False
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with Path(path).open("a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


def report_failure(message: str) -> None:
    """Print a failure to stderr, as a workflow error annotation under Actions."""
    if in_github_actions():
        # Annotations are single-line; newlines must be escaped
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        print(f"::error::{escaped}", file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
