"""Configuration for the browser-driven test runner."""

from collections.abc import Sequence

from pydantic import BaseModel


class BrowserRunnerConfig(BaseModel):
    """Configuration for the browser-driven test runner."""

    executable: str = "npx"
    args: Sequence[str] = ("playwright", "test")
    reporter_args: Sequence[str] = ("--reporter=json",)
    # Forward the suite timeout to playwright as its per-test timeout
    pass_timeout: bool = True
