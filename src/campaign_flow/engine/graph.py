"""Directed-graph workflow engine.

A workflow is a set of named async node handlers plus, per node, an ordered
list of guarded transitions. Execution starts at the `start` sentinel, runs
the current node's handler, follows the first transition whose condition
holds for the new state, and stops when it reaches the `end` sentinel.

    workflow = (
        Workflow()
        .add_node("draft", draft)
        .add_transition(START, "draft")
        .add_transition("draft", END)
    )
    final_state = await workflow.execute({"status": "initialized"})

Graphs are built per run and never mutated while executing, so concurrent
runs share nothing.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from campaign_flow.engine.errors import (
    AmbiguousTransitionError,
    GraphValidationError,
    NoValidTransitionError,
    UnknownNodeError,
)
from campaign_flow.utils.logging import get_logger, DIM, GREEN, RED, YELLOW, RESET

log = get_logger()

START = "start"
END = "end"

State = dict[str, Any]
NodeHandler = Callable[[State], Awaitable[State]]
Condition = Callable[[State], bool]


class MatchPolicy(str, Enum):
    FIRST_MATCH = "first-match"
    REQUIRE_EXCLUSIVE = "require-exclusive"


@dataclass(frozen=True)
class Transition:
    source: str
    target: str
    # None means unconditional
    condition: Condition | None = None

    def matches(self, state: State) -> bool:
        return self.condition is None or bool(self.condition(state))


@dataclass
class ExecutionResult:
    """Outcome of Workflow.run().

    On failure `state` is the last state a handler returned successfully
    (the initial state if the first handler failed) and `failed_node` names
    the node whose handler or routing raised.
    """

    ok: bool
    state: State
    error: Exception | None = None
    failed_node: str | None = None


@dataclass
class _Progress:
    node: str = START
    state: State = field(default_factory=dict)


async def _identity(state: State) -> State:
    return state


class Workflow:
    def __init__(self, match_policy: MatchPolicy = MatchPolicy.FIRST_MATCH):
        self.match_policy = match_policy
        self._nodes: dict[str, NodeHandler] = {START: _identity, END: _identity}
        self._transitions: dict[str, list[Transition]] = {START: [], END: []}

    @property
    def nodes(self) -> list[str]:
        return list(self._nodes)

    def transitions_from(self, node: str) -> list[Transition]:
        return list(self._transitions.get(node, []))

    def handler(self, node: str) -> NodeHandler:
        try:
            return self._nodes[node]
        except KeyError:
            raise UnknownNodeError(node) from None

    def add_node(self, name: str, handler: NodeHandler) -> Workflow:
        """Register `handler` under `name`. Re-registering a name replaces the handler."""
        if name in (START, END):
            raise ValueError(f'"{name}" is a reserved node name')
        self._nodes[name] = handler
        self._transitions.setdefault(name, [])
        return self

    def add_transition(self, source: str, target: str, condition: Condition | None = None) -> Workflow:
        """Append a guarded edge. Transitions from one node are tried in registration order."""
        self._transitions.setdefault(source, []).append(Transition(source, target, condition))
        return self

    def next_node(self, node: str, state: State) -> str:
        """Pick the transition target for `state` leaving `node`."""
        candidates = self._transitions.get(node, [])

        if self.match_policy is MatchPolicy.REQUIRE_EXCLUSIVE:
            matched = [t.target for t in candidates if t.matches(state)]
            if len(matched) > 1:
                raise AmbiguousTransitionError(node, matched)
            if matched:
                return matched[0]
            raise NoValidTransitionError(node)

        for transition in candidates:
            if transition.matches(state):
                return transition.target
        raise NoValidTransitionError(node)

    def validate(self, allow_cycles: bool = False) -> Workflow:
        """Check the graph before it is executed.

        Raises GraphValidationError listing every dangling edge, duplicate
        unconditioned transition, cycle (unless `allow_cycles`) and an
        unreachable `end`. Nodes unreachable from `start` only log a warning.
        """
        problems: list[str] = []

        for source, transitions in self._transitions.items():
            if source not in self._nodes:
                problems.append(f'transition source "{source}" is not a node')
            for t in transitions:
                if t.target not in self._nodes:
                    problems.append(f'transition {source} -> {t.target} targets an unknown node')
            unconditioned = [t.target for t in transitions if t.condition is None]
            if len(unconditioned) > 1:
                problems.append(
                    f'node "{source}" has {len(unconditioned)} unconditioned transitions '
                    f"({', '.join(unconditioned)})"
                )

        reachable = self._reachable_from(START)
        if END not in reachable:
            problems.append(f'"{END}" is not reachable from "{START}"')
        unreachable = [n for n in self._nodes if n not in reachable and n != END]
        if unreachable:
            log.warning(f"  {YELLOW}⚠{RESET} Unreachable nodes: {', '.join(unreachable)}")

        if not allow_cycles:
            cycle = self._find_cycle()
            if cycle:
                problems.append("cycle detected: " + " -> ".join(cycle))

        if problems:
            raise GraphValidationError(problems)
        return self

    def _reachable_from(self, origin: str) -> set[str]:
        seen = {origin}
        queue = deque([origin])
        while queue:
            node = queue.popleft()
            for t in self._transitions.get(node, []):
                if t.target not in seen:
                    seen.add(t.target)
                    queue.append(t.target)
        return seen

    def _find_cycle(self) -> list[str] | None:
        visiting: list[str] = []
        done: set[str] = set()

        def visit(node: str) -> list[str] | None:
            if node in visiting:
                return visiting[visiting.index(node):] + [node]
            if node in done:
                return None
            visiting.append(node)
            for t in self._transitions.get(node, []):
                found = visit(t.target)
                if found:
                    return found
            visiting.pop()
            done.add(node)
            return None

        for node in list(self._transitions):
            found = visit(node)
            if found:
                return found
        return None

    async def execute(self, initial_state: State) -> State:
        """Run the graph from `start` to `end` and return the final state.

        Exceptions raised by a handler propagate unchanged; no transition is
        evaluated and no further node runs after one.
        """
        return await self._interpret(initial_state, _Progress(state=initial_state))

    async def run(self, initial_state: State) -> ExecutionResult:
        """Like execute(), but report failures alongside the last good state."""
        progress = _Progress(state=initial_state)
        try:
            state = await self._interpret(initial_state, progress)
        except Exception as e:
            log.error(f"  {RED}✗{RESET} Workflow stopped at {progress.node}: {e}")
            return ExecutionResult(ok=False, state=progress.state, error=e, failed_node=progress.node)
        return ExecutionResult(ok=True, state=state)

    async def _interpret(self, state: State, progress: _Progress) -> State:
        node = START
        log.info(f"Starting workflow execution at node: {node}")

        while node != END:
            progress.node = node
            handler = self.handler(node)
            state = await handler(state)
            progress.state = state
            log.info(f"  {GREEN}✓{RESET} Executed node: {node}")

            node = self.next_node(node, state)
            log.debug(f"  {DIM}→ following transition to: {node}{RESET}")

        progress.node = END
        return state
