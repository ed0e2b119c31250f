"""taskgate.

A durable, single-worker job queue that drives a conversational agent through
a bounded turn loop and pauses for human approval before dangerous tool calls.

High-level architecture
-----------------------

- ``taskgate.engine``:

  - Job schemas and the JSON/SQL job stores (with crash recovery on load).
  - The approval gate that decides when a tool batch must wait for a human.
  - A LangGraph-based turn runner that resumes exactly where a pause left off.
  - ``JobManager``: the job arena, FIFO queue and worker loop.

- ``taskgate.server``: a thin FastAPI boundary over ``JobManager``.

- ``taskgate.core``: logging configuration shared by both.

Typical workflow
----------------

1. ``create_job("execute_command", {"command": ...})`` queues a job.
2. The worker runs it; the agent requests tools turn by turn.
3. A dangerous tool batch pauses the job in ``waiting_approval``.
4. ``resolve_approval`` either re-queues the job at the front (approved) or
   fails it (rejected).
5. The resumed job runs the stored batch first, then continues the loop.
"""

__version__ = "0.1.0"
