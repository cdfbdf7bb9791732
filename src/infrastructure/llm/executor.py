"""
Single-turn agent execution.
"""
import logging
from typing import Any

from agent_framework import SequentialBuilder, WorkflowOutputEvent

logger = logging.getLogger(__name__)


async def run_single_agent(agent: Any, prompt: str, label: str = "") -> str:
    """
    Send one prompt to ``agent`` and return the concatenated text output.

    The response is streamed; every text chunk of every output event is kept
    so long brand kits are not cut short. Retries and timeouts belong to the
    model router.
    """
    workflow = SequentialBuilder().participants([agent]).build()
    chunks: list[str] = []
    async for event in workflow.run_stream(prompt):
        if not isinstance(event, WorkflowOutputEvent):
            continue
        chunks.extend(msg.text for msg in event.data if getattr(msg, "text", None))

    text = "".join(chunks)
    logger.debug(f"[{label or 'agent'}] received {len(text)} chars")
    return text
