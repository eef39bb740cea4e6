"""Exceptions and warnings raised by the pipeline."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for fatal pipeline errors."""


class UnrecognizedPeriodToken(PipelineError, ValueError):
    """A month token is neither a known short form nor canonical MONYYYY."""

    def __init__(self, tokens):
        if isinstance(tokens, (list, tuple)):
            self.tokens = list(tokens)
        else:
            self.tokens = [tokens]
        shown = ", ".join(repr(t) for t in self.tokens)
        super().__init__(f"Unrecognised appointment month token(s): {shown}")


class SchemaMismatch(PipelineError, ValueError):
    """An input table does not have the columns or values the pipeline needs."""


class UnrecognizedCategory(SchemaMismatch):
    """A categorical value is not one of the enumerated spellings."""

    def __init__(self, field: str, values):
        self.field = field
        self.values = sorted(str(v) for v in values)
        super().__init__(
            f"Unrecognised value(s) for '{field}': " + ", ".join(self.values)
        )


class JoinKeyUnmatched(UserWarning):
    """Regions with no deprivation summary; their deprivation fields stay null."""
