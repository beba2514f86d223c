"""Interchangeable interpreters for a Workflow.

`native` runs Workflow.execute() directly. `langgraph` compiles the same
nodes and transitions into a LangGraph StateGraph: each node gets one
conditional edge whose router applies the workflow's match policy, so both
interpreters visit the same nodes and raise the same routing errors.
"""

from __future__ import annotations

from langgraph.graph import END as LG_END
from langgraph.graph import START as LG_START
from langgraph.graph import StateGraph

from campaign_flow.config import settings
from campaign_flow.engine.errors import UnknownNodeError
from campaign_flow.engine.graph import END, START, State, Workflow
from campaign_flow.utils.logging import get_logger, DIM, RESET

log = get_logger()

ENGINES = ("native", "langgraph")


def _to_langgraph(node: str) -> str:
    if node == END:
        return LG_END
    return node


def _router(workflow: Workflow, node: str):
    def route(state: State) -> str:
        target = workflow.next_node(node, state)
        # LangGraph ignores writes to branches it does not know and stops quietly
        if target not in workflow.nodes:
            raise UnknownNodeError(target)
        log.debug(f"  {DIM}→ following transition to: {target}{RESET}")
        return _to_langgraph(target)

    route.__name__ = f"route_{node}"
    return route


def compile_langgraph(workflow: Workflow, state_schema: type):
    """Compile `workflow` into a runnable LangGraph graph.

    `state_schema` is the TypedDict describing every key a node may write;
    LangGraph drops updates for keys it does not declare.
    """
    builder = StateGraph(state_schema)
    for name in workflow.nodes:
        if name in (START, END):
            continue
        builder.add_node(name, workflow.handler(name))

    for name in workflow.nodes:
        if name == END:
            continue
        source = LG_START if name == START else name
        builder.add_conditional_edges(source, _router(workflow, name))

    return builder.compile()


async def run_workflow(
    workflow: Workflow,
    initial_state: State,
    engine: str | None = None,
    state_schema: type | None = None,
) -> State:
    """Execute `workflow` with the selected interpreter and return the final state."""
    engine = engine or settings.workflow_engine
    if engine not in ENGINES:
        raise ValueError(f"Unknown workflow engine: {engine} (expected one of {', '.join(ENGINES)})")

    if engine == "native":
        return await workflow.execute(initial_state)

    if state_schema is None:
        raise ValueError("The langgraph engine needs a state schema")
    log.info(f"Starting workflow execution on LangGraph at node: {START}")
    graph = compile_langgraph(workflow, state_schema)
    return dict(await graph.ainvoke(initial_state))
