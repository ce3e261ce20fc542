"""Configuration for the plain test runner."""

from collections.abc import Sequence

from pydantic import BaseModel


class ProcessRunnerConfig(BaseModel):
    """Configuration for the plain test runner."""

    executable: str = "npx"
    args: Sequence[str] = ("vitest", "run")
    # Appended after the suite path; JSON output is what the normalizer decodes
    reporter_args: Sequence[str] = ("--reporter=json", "--run")
