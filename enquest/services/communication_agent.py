"""
Chat coach for participants.

The agent keeps no state between calls: the caller passes the profile, the
stored history and the new message, and gets back the reply together with the
updated (trimmed) history.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any

from enquest.models import now_iso
from enquest.prompts.agent_prompts import COMMUNICATION_AGENT, AGENT_PROMPT, AGENT_FALLBACK_REPLY
from enquest.utils.logging_utils import get_logger
from enquest.utils.parsing import parse_markdown

logger = get_logger("AGENT")

MAX_HISTORY = 20
PROMPT_HISTORY = 5


@dataclass
class AgentReply:
    response: str
    history: List[Dict[str, Any]] = field(default_factory=list)
    fallback: bool = False


def trim_history(history, keep_last_n=MAX_HISTORY):
    if keep_last_n <= 0:
        return []
    return list(history[-keep_last_n:])


def history_from_records(records):
    """Stored chatHistory documents ({role, message, timestamp}) to agent history entries."""
    return [
        {
            "role": r.get("role", "user"),
            "content": r.get("message", ""),
            "timestamp": r.get("timestamp"),
        }
        for r in records
    ]


def records_from_history(entries):
    """Agent history entries back to the stored chatHistory document shape."""
    return [
        {"role": e["role"], "message": e["content"], "timestamp": e.get("timestamp")}
        for e in entries
    ]


def format_profile(profile):
    lines = [
        f"- Name: {profile.get('name') or 'unknown'}",
        f"- Department: {profile.get('department') or 'unknown'}",
        f"- Age: {profile.get('age') or 'unknown'}",
        f"- Hobbies: {profile.get('hobbies') or 'unknown'}",
        f"- Hometown: {profile.get('hometown') or 'unknown'}",
        f"- Favorite food: {profile.get('favoriteFood') or 'unknown'}",
    ]
    answers = profile.get("surveyAnswers") or {}
    if answers:
        lines.append("- Survey answers: " + ", ".join(f"{k}: {v}" for k, v in sorted(answers.items())))
    progress = profile.get("bingoProgress") or []
    if progress:
        lines.append(f"- Bingo progress: {sum(1 for c in progress if c)}/{len(progress)} missions done")
    return "\n".join(lines)


def format_history(history):
    return "\n".join(f"{m['role']}: {m['content']}" for m in history[-PROMPT_HISTORY:])


def build_prompt(agent_config, profile, history, message, event=None):
    event_name = (event or {}).get("eventName")
    return AGENT_PROMPT.format(
        name=agent_config["name"],
        description=agent_config["description"],
        instructions=agent_config["instructions"].strip(),
        profile=format_profile(profile),
        event_line=f"\nCurrent event: {event_name}\n" if event_name else "",
        history=format_history(history) or "(none)",
        message=message,
    )


def fallback_reply(profile):
    return AGENT_FALLBACK_REPLY.format(name=profile.get("name") or "there")


def reply(text_client, profile, history, message, event=None, agent_config=None) -> AgentReply:
    """
    Produce the agent's answer to message.

    Args:
        text_client: TextGenerationClient
        profile: user document, optionally enriched with surveyAnswers/bingoProgress
        history: prior entries ({role, content, timestamp}), oldest first
        message: the new user message
        event: event document for context, if any
        agent_config: persona; defaults to the communication coach

    Returns:
        AgentReply with the response text and the history including this
        exchange, trimmed to the last MAX_HISTORY entries.
    """
    agent_config = agent_config or COMMUNICATION_AGENT
    history = trim_history(list(history) + [{"role": "user", "content": message, "timestamp": now_iso()}])

    try:
        # Prompt uses the prior turns only; the new message is passed separately
        prompt = build_prompt(agent_config, profile, history[:-1], message, event)
        text = text_client.complete(
            prompt,
            max_tokens=agent_config.get("max_tokens", 1536),
            temperature=agent_config.get("temperature", 0.8),
            top_p=agent_config.get("top_p", 0.9),
        )
        response = (text or "").strip()
        fallback = not response
        if fallback:
            logger.warning("[AGENT] Empty reply, using fallback")
            response = fallback_reply(profile)
    except Exception as e:
        logger.exception(f"[AGENT] {agent_config.get('name')} error: {e}")
        response = fallback_reply(profile)
        fallback = True

    history = trim_history(history + [{"role": "assistant", "content": response, "timestamp": now_iso()}])
    return AgentReply(response=response, history=history, fallback=fallback)


def render_reply(text, output="plain"):
    """Plain text is returned untouched; "html" renders the markdown reply."""
    if output == "html":
        return parse_markdown(text, output="html")
    return text
