"""Exceptions raised by the workflow engine.

All of them describe a badly assembled graph rather than a runtime or user
condition. Errors raised by node handlers are never wrapped in these.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for graph-definition errors."""


class UnknownNodeError(WorkflowError):
    def __init__(self, node: str):
        self.node = node
        super().__init__(f'Node "{node}" not found in workflow')


class NoValidTransitionError(WorkflowError):
    def __init__(self, node: str):
        self.node = node
        super().__init__(f'No valid transition from node "{node}"')


class AmbiguousTransitionError(WorkflowError):
    def __init__(self, node: str, targets: list[str]):
        self.node = node
        self.targets = targets
        super().__init__(
            f'Multiple transitions from node "{node}" matched: {", ".join(targets)}'
        )


class GraphValidationError(WorkflowError):
    """Raised by Workflow.validate() with every problem found."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid workflow graph: " + "; ".join(problems))
