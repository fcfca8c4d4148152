"""Idempotent convergence of external state.

A `Resource` describes a goal ("this session exists", "this repo is cloned")
through a cheap status predicate and a single convergence action. `process()`
resolves a resource and its preconditions depth-first:

1. hard requirements are processed in order, failing fast;
2. if the resource is already met, nothing else happens;
3. soft requirements are processed in order, failing fast;
4. the convergence action runs once;
5. the status predicate is re-checked and a miss raises `PostconditionError`.

Spawn failures (`ShellError`) propagate unchanged from any step.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

logger = logging.getLogger(__name__)


class ConvergenceError(Exception):
    """Base class for failures raised by the convergence engine."""


class PostconditionError(ConvergenceError):
    """The convergence action ran but the resource is still unmet."""

    def __init__(self, resource: "Resource") -> None:
        super().__init__(f"{resource.describe()} is still unmet after converging")
        self.resource = resource


class Resource(ABC):
    """An external-state goal.

    Subclasses implement `is_met` (pure, repeatable) and `meet` (the only
    place allowed to change external state). Resources are built per call
    and hold no long-lived state.
    """

    @abstractmethod
    def is_met(self) -> bool:
        """Report whether the goal currently holds."""

    @abstractmethod
    def meet(self) -> None:
        """Try to establish the goal."""

    def hard_requirements(self) -> Sequence["Resource"]:
        """Resources that must hold before `is_met` is meaningful."""
        return ()

    def soft_requirements(self) -> Sequence["Resource"]:
        """Resources converged before `meet` runs."""
        return ()

    def describe(self) -> str:
        return type(self).__name__


def process(resource: Resource) -> None:
    """Converge `resource`, raising on the first failure in the chain."""
    for requirement in resource.hard_requirements():
        process(requirement)

    if resource.is_met():
        logger.debug("%s already met", resource.describe())
        return

    for requirement in resource.soft_requirements():
        process(requirement)

    logger.info("Converging %s", resource.describe())
    resource.meet()

    if not resource.is_met():
        logger.error("Postcondition violated: %s", resource.describe())
        raise PostconditionError(resource)

    logger.debug("%s converged", resource.describe())
