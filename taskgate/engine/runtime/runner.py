"""Bounded multi-turn agent loop as a LangGraph state machine.

``TurnRunner`` drives one ``running`` job against its agent until the agent
stops requesting tools, the turn limit is hit, a batch needs approval, or an
error escapes from the agent.

Graph
-----

::

    start ──> resume ──> turn <──────────── execute
      │                   │                    ▲
      └─────────────────> ├─> gate ────────────┘
                          │     └─> END (paused)
                          ├─> finish ─> END (completed)
                          └─> limit ──> END (completed, limit reached)

``resume`` runs only when the job carries ``pending_tool_calls`` from an
approved pause. It executes that batch before any new message is sent, and
does not count as a turn.

Every node writes through the ``JobJournal`` so each transcript or log append
is persisted before the next event is consumed.
"""

from __future__ import annotations

from typing import List, Sequence

from langgraph.graph import END, StateGraph

from taskgate.core.logging_config import get_logger

from ..agent import Agent, AgentEventType
from ..journal import JobJournal
from ..policy.gate import ApprovalGate
from ..schemas.domain import Job, MessageRole, ToolCallRequest
from ..transcript import (
    new_message,
    tool_call_log,
    tool_call_message,
    tool_response_log,
    tool_result_log,
    tool_result_message,
    tool_results_message,
)
from .models import OutcomeKind, TurnOutcome, _TurnState

logger = get_logger(__name__)

MAX_TURNS = 50


class TurnRunner:
    """Run the agent turn loop for one job at a time.

    The runner holds no per-job state between calls; everything needed to
    resume lives on the ``Job`` (``turn_count`` and ``pending_tool_calls``).
    """

    def __init__(self, *, gate: ApprovalGate, journal: JobJournal, max_turns: int = MAX_TURNS) -> None:
        """
        Initialize the TurnRunner.

        Args:
            gate: Approval gate consulted for every tool-call batch.
            journal: Sink for job log lines and transcript messages.
            max_turns: Upper bound on turns per job, across pauses.
        """
        if not 1 <= max_turns <= MAX_TURNS:
            raise ValueError(f"max_turns must be between 1 and {MAX_TURNS}")
        self._gate = gate
        self._journal = journal
        self._max_turns = max_turns
        self._graph = self._build_graph()

    @property
    def max_turns(self) -> int:
        return self._max_turns

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_TurnState)
        g.add_node("start", self._node_start)
        g.add_node("resume", self._node_resume)
        g.add_node("turn", self._node_turn)
        g.add_node("gate", self._node_gate)
        g.add_node("execute", self._node_execute)
        g.add_node("limit", self._node_limit)
        g.add_node("finish", self._node_finish)

        g.set_entry_point("start")
        g.add_conditional_edges("start", self._route_after_start, {"resume": "resume", "turn": "turn"})
        g.add_edge("resume", "turn")
        g.add_conditional_edges(
            "turn",
            self._route_after_turn,
            {
                "limit": "limit",
                "gate": "gate",
                "finish": "finish",
            },
        )
        g.add_conditional_edges("gate", self._route_after_gate, {"pause": END, "execute": "execute"})
        g.add_edge("execute", "turn")
        g.add_edge("limit", END)
        g.add_edge("finish", END)
        return g.compile()

    async def run(self, job: Job, agent: Agent) -> TurnOutcome:
        """Drive ``job`` until it completes, fails, or pauses for approval.

        Exceptions raised by the agent or by tool execution end the run with a
        failed outcome; they never propagate to the caller.
        """
        state: _TurnState = {
            "job": job,
            "agent": agent,
            "turn_count": job.turn_count,
            "max_turns": self._max_turns,
            "current_message": str(job.payload.get("command") or ""),
            "full_response": "",
        }
        try:
            final = await self._graph.ainvoke(state, config={"recursion_limit": self._max_turns * 3 + 10})
        except Exception as e:
            logger.exception(f"Turn loop for job {job.id} failed")
            return TurnOutcome.failed(str(e) or e.__class__.__name__, turn_count=job.turn_count)
        return final["outcome"]

    def _route_after_start(self, state: _TurnState) -> str:
        return "resume" if state["job"].pending_tool_calls else "turn"

    def _route_after_turn(self, state: _TurnState) -> str:
        if state.get("limit_reached"):
            return "limit"
        if state.get("turn_requests"):
            return "gate"
        return "finish"

    def _route_after_gate(self, state: _TurnState) -> str:
        outcome = state.get("outcome")
        if outcome is not None and outcome.kind == OutcomeKind.paused:
            return "pause"
        return "execute"

    async def _node_start(self, state: _TurnState) -> _TurnState:
        """Graph entry node. Currently a no-op."""
        return state

    async def _node_resume(self, state: _TurnState) -> dict:
        job = state["job"]
        requests = list(job.pending_tool_calls or [])
        await self._journal.add_log(job.id, f"[Resuming after approval - executing {len(requests)} tool call(s)]")
        next_message = await self._execute_batch(job, state["agent"], requests)
        job.pending_tool_calls = None
        await self._journal.persist()
        return {"current_message": next_message}

    async def _node_turn(self, state: _TurnState) -> dict:
        """Send the outbound message and consume the agent's event stream in order."""
        job = state["job"]
        turn_count = state["turn_count"]
        if turn_count >= state["max_turns"]:
            return {"limit_reached": True, "turn_requests": []}

        turn_count += 1
        job.turn_count = turn_count

        requests: List[ToolCallRequest] = []
        has_finished = False
        turn_text = ""

        async for event in state["agent"].send_message(state["current_message"]):
            if event.type == AgentEventType.content:
                chunk = "" if event.value is None else str(event.value)
                turn_text += chunk
                await self._journal.add_log(job.id, chunk)
            elif event.type == AgentEventType.thought:
                summary = event.text("summary", "...")
                await self._journal.add_log(job.id, f"[Thinking] {summary}")
                await self._journal.add_message(job.id, new_message(MessageRole.thinking, summary))
            elif event.type == AgentEventType.tool_call_request:
                request = event.tool_request()
                await self._journal.add_log(job.id, tool_call_log(request))
                await self._journal.add_message(job.id, tool_call_message(request))
                requests.append(request)
            elif event.type == AgentEventType.tool_call_response:
                await self._journal.add_log(
                    job.id, tool_response_log(event.text("name", "tool"), event.text("result_display"))
                )
            elif event.type == AgentEventType.error:
                error = event.text("message", "Unknown error")
                await self._journal.add_log(job.id, f"[Error] {error}")
                await self._journal.add_message(job.id, new_message(MessageRole.system, f"Error: {error}"))
            elif event.type == AgentEventType.finished:
                await self._journal.add_log(job.id, f"[Finished] Reason: {event.text('reason')}")
                has_finished = True

        if turn_text.strip():
            await self._journal.add_message(job.id, new_message(MessageRole.assistant, turn_text))

        return {
            "turn_count": turn_count,
            "full_response": state["full_response"] + turn_text,
            "turn_requests": requests,
            "has_finished": has_finished,
        }

    async def _node_gate(self, state: _TurnState) -> dict:
        job = state["job"]
        requests = state.get("turn_requests") or []
        if not self._gate.check(requests).needs:
            return {}
        await self._gate.pause(job, requests, turn_count=state["turn_count"])
        return {"outcome": TurnOutcome.paused(turn_count=state["turn_count"])}

    async def _node_execute(self, state: _TurnState) -> dict:
        job = state["job"]
        requests = state.get("turn_requests") or []
        await self._journal.add_log(job.id, f"[Executing {len(requests)} tool call(s)...]")
        next_message = await self._execute_batch(job, state["agent"], requests)
        return {"current_message": next_message, "turn_requests": []}

    async def _node_limit(self, state: _TurnState) -> dict:
        job = state["job"]
        await self._journal.add_log(job.id, f"[Warning] Reached maximum turn limit ({state['max_turns']})")
        logger.warning(f"Job {job.id} reached the turn limit of {state['max_turns']}")
        return {
            "outcome": TurnOutcome.completed(
                state["full_response"], turn_count=state["turn_count"], limit_reached=True
            )
        }

    async def _node_finish(self, state: _TurnState) -> dict:
        return {"outcome": TurnOutcome.completed(state["full_response"], turn_count=state["turn_count"])}

    async def _execute_batch(self, job: Job, agent: Agent, requests: Sequence[ToolCallRequest]) -> str:
        """Execute a batch as a unit and return the next outbound message."""
        results = await agent.execute_tool_calls(list(requests))
        for result in results:
            await self._journal.add_log(job.id, tool_result_log(result))
            await self._journal.add_message(job.id, tool_result_message(result))
        return tool_results_message(results)
