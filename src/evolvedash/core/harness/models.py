"""
Data models for generator invocations.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TokenUsage(BaseModel):
    """
    Token usage reported by a generator run.

    Only populated by backends whose tool reports it (claude-cli).
    """

    input_tokens: int = Field(default=0, description="Input tokens consumed")
    output_tokens: int = Field(default=0, description="Output tokens generated")
    cost_usd: float | None = Field(default=None, description="Reported cost in USD (if available)")

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed (input + output)."""
        return self.input_tokens + self.output_tokens


class HarnessResult(BaseModel):
    """
    Result from a generator invocation.

    Contains the tool's output text, exit status and timing for one run.
    """

    output: str = Field(default="", description="Text output from the generator")
    stderr: str = Field(default="", description="Captured standard error")
    usage: TokenUsage = Field(default_factory=TokenUsage, description="Token usage statistics")
    duration_seconds: float = Field(default=0.0, description="How long the invocation took")
    exit_code: int = Field(default=0, description="Exit code from the generator process")
    error: str | None = Field(default=None, description="Error message if invocation failed")
    timed_out: bool = Field(default=False, description="Whether the run hit its timeout")
    timestamp: datetime = Field(
        default_factory=datetime.now, description="When the invocation occurred"
    )

    @property
    def success(self) -> bool:
        """Check if invocation was successful."""
        return self.exit_code == 0 and self.error is None

    @property
    def failed(self) -> bool:
        """Check if invocation failed."""
        return not self.success
