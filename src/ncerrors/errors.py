"""Error taxonomy for the translator itself.

Failures of the *diagnostics* being translated are data, not exceptions: they
come out of the translator as :class:`ncerrors.models.StructuredError`
instances. The classes here cover the translator's own failures.

Public API:
- TranslationError: base class, a ``RuntimeError``
- ContractViolation: an input broke an assumption about the upstream message
  format (missing path, missing quoted value, empty record, ...)
"""
from __future__ import annotations


class TranslationError(RuntimeError):
    pass


class ContractViolation(TranslationError):
    """Raised when a diagnostic does not carry what its matching rule needs.

    ``rule`` names the rule or operation that tripped, ``diagnostic`` is the
    offending message text (when there is one).
    """

    def __init__(self, reason: str, *, rule: str, diagnostic: str | None = None) -> None:
        self.reason = reason
        self.rule = rule
        self.diagnostic = diagnostic
        text = f"{rule}: {reason}"
        if diagnostic is not None:
            text += f" (diagnostic: {diagnostic!r})"
        super().__init__(text)


__all__ = ["TranslationError", "ContractViolation"]
