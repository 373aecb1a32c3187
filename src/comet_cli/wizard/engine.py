"""
Sequential wizard engine.

A wizard is an ordered list of :class:`Step` descriptors. Each step is a
callable receiving a read-only snapshot of the results of the steps that
ran before it and returning its own result. Steps run one at a time in
declaration order; a step may be skipped through its ``when`` predicate.

A step cancels the whole wizard by returning :data:`CANCELLED` or by
raising one of the exception types passed as ``abort_on`` (for example
the exception a prompt library raises on Ctrl-C). The engine never
performs side effects itself: undoing work after a cancellation is left
to the caller, which sees ``WizardResult.cancelled``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Type


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


class _Cancelled:
    """Type of the :data:`CANCELLED` marker."""

    _instance: Optional["_Cancelled"] = None

    def __new__(cls) -> "_Cancelled":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCELLED"

    def __bool__(self) -> bool:
        return False


CANCELLED = _Cancelled()

Results = Mapping[str, Any]


@dataclass(frozen=True)
class Step:
    """A named wizard step.

    Attributes
    ----------
    name : str
        Key under which the step's result is stored.
    run : Callable[[Results], Any]
        Computes the result from the results of the earlier steps.
    when : Callable[[Results], bool], optional
        If given and it returns False, the step is skipped and no result
        is recorded for it.
    """

    name: str
    run: Callable[[Results], Any]
    when: Optional[Callable[[Results], bool]] = None


@dataclass
class WizardResult:
    """Outcome of a wizard run.

    ``results`` holds the result of every step that completed, in run
    order. When ``cancelled`` is True, ``cancelled_at`` names the step
    that cancelled and later steps did not run.
    """

    results: Dict[str, Any] = field(default_factory=dict)
    cancelled: bool = False
    cancelled_at: Optional[str] = None


class Wizard:
    """Run steps strictly in order, collecting their results."""

    def __init__(
        self,
        steps: Sequence[Step],
        abort_on: Tuple[Type[BaseException], ...] = (),
    ) -> None:
        names = [step.name for step in steps]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate step names: {', '.join(duplicates)}")
        self.steps = list(steps)
        self.abort_on = abort_on

    def run(self) -> WizardResult:
        outcome = WizardResult()
        for step in self.steps:
            snapshot = MappingProxyType(dict(outcome.results))
            if step.when is not None and not step.when(snapshot):
                logger.debug("Skipping step '%s'", step.name)
                continue

            logger.debug("Running step '%s'", step.name)
            try:
                result = step.run(snapshot)
            except self.abort_on as exc:
                logger.debug("Step '%s' aborted: %r", step.name, exc)
                result = CANCELLED

            if result is CANCELLED:
                logger.info("Wizard cancelled at step '%s'", step.name)
                outcome.cancelled = True
                outcome.cancelled_at = step.name
                return outcome
            outcome.results[step.name] = result
        return outcome
