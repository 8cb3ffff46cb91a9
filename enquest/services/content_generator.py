"""
AI content for icebreaks, bingo boards and event surveys.

Every public method follows the same contract: build a prompt, call the text
service, pull the expected structure out of the reply, and fall back to fixed
hand-written content when anything goes wrong. Callers never see an exception
or an empty result.
"""

from typing import List, Dict, Any, Optional

from enquest.models import BingoMission, Event, User, BOARD_SIZE
from enquest.utils.logging_utils import get_logger
from enquest.utils.parsing import extract_json_array, clean_strings, fit_to_count
from enquest.prompts.icebreak_prompts import (
    ICEBREAK_TOPIC_PROMPT, ICEBREAK_QUESTIONS_PROMPT, REVERSE_QUESTIONS_PROMPT,
    FALLBACK_TOPIC, FALLBACK_QUESTIONS, FALLBACK_REVERSE_QUESTIONS
)
from enquest.prompts.bingo_prompts import BINGO_MISSIONS_PROMPT, FALLBACK_MISSIONS
from enquest.prompts.survey_prompts import SURVEY_QUESTIONS_PROMPT, FALLBACK_SURVEY_QUESTIONS

logger = get_logger("CONTENT_GEN")

QUESTION_COUNT = 5
MAX_SURVEY_QUESTIONS = 10
UNKNOWN = "unknown"
NO_ANSWER = "no answer"


def format_profile(user: User) -> str:
    return "\n".join(f"- {label}: {value or UNKNOWN}" for label, value in user.profile_fields())


def format_event_answers(answers: Optional[Dict[str, Any]], event: Optional[Event]) -> str:
    """
    Render survey answers as "- question: answer" lines. Answers are keyed
    answer1..answerN in survey question order.
    """
    if event is None or not event.survey_questions:
        return ""
    answers = answers or {}
    lines = []
    for i, question in enumerate(event.survey_questions):
        answer = answers.get(f"answer{i + 1}") or NO_ANSWER
        lines.append(f"- {question.question}: {answer}")
    return "Event survey answers:\n" + "\n".join(lines)


def display_name(user: User, default: str) -> str:
    return user.name or default


class ContentGenerator:
    """Generates icebreak advice, bingo missions and survey questions."""

    def __init__(self, text_client):
        """
        Args:
            text_client: TextGenerationClient (or anything with a compatible complete())
        """
        self.text_client = text_client

    # ------------------ ICEBREAK ------------------
    def icebreak_topic(self, user_a: User, user_b: User, answers_a=None, answers_b=None, event=None) -> str:
        """One piece of advice for user_a on what to ask user_b."""
        logger.info(f"[TOPIC] {user_a.name or user_a.id} -> {user_b.name or user_b.id}")
        try:
            prompt = ICEBREAK_TOPIC_PROMPT.format(
                asker=display_name(user_a, "you"),
                partner=display_name(user_b, "your partner"),
                partner_profile=format_profile(user_b),
                partner_answers=format_event_answers(answers_b, event),
                asker_profile=format_profile(user_a),
                asker_answers=format_event_answers(answers_a, event),
            )
            text = self.text_client.complete(prompt, max_tokens=512, temperature=0.8, top_p=0.95)
            topic = (text or "").strip()
            if not topic:
                logger.warning("[TOPIC] Empty reply, using fallback")
                return FALLBACK_TOPIC
            return topic
        except Exception as e:
            logger.exception(f"[TOPIC] Generation failed: {e}")
            return FALLBACK_TOPIC

    def icebreak_questions(self, user_a: User, user_b: User, answers_a=None, answers_b=None, event=None) -> List[str]:
        """Five discussion starters for the scanner (user_a) about the scanned user (user_b)."""
        logger.info(f"[QUESTIONS] {user_a.name or user_a.id} -> {user_b.name or user_b.id}")
        prompt_args = dict(
            asker=display_name(user_a, "you"),
            partner=display_name(user_b, "your partner"),
            partner_profile=format_profile(user_b),
            partner_answers=format_event_answers(answers_b, event),
            asker_profile=format_profile(user_a),
            asker_answers=format_event_answers(answers_a, event),
        )
        return self._generate_list(
            "QUESTIONS", ICEBREAK_QUESTIONS_PROMPT, prompt_args, QUESTION_COUNT, FALLBACK_QUESTIONS
        )

    def reverse_questions(self, user_a: User, user_b: User, answers_a=None, answers_b=None, event=None) -> List[str]:
        """
        Five things the scanned user (user_b) can bring up about themself when
        talking to the scanner (user_a).
        """
        logger.info(f"[REVERSE] {user_b.name or user_b.id} -> {user_a.name or user_a.id}")
        prompt_args = dict(
            speaker=display_name(user_b, "you"),
            listener=display_name(user_a, "your partner"),
            listener_profile=format_profile(user_a),
            listener_answers=format_event_answers(answers_a, event),
            speaker_profile=format_profile(user_b),
            speaker_answers=format_event_answers(answers_b, event),
        )
        return self._generate_list(
            "REVERSE", REVERSE_QUESTIONS_PROMPT, prompt_args, QUESTION_COUNT, FALLBACK_REVERSE_QUESTIONS
        )

    def _generate_list(self, tag, template, prompt_args, count, fallback):
        try:
            prompt = template.format(**prompt_args)
            text = self.text_client.complete(prompt, max_tokens=1536, temperature=0.8, top_p=0.95)
            parsed = extract_json_array(text)
            if parsed is None:
                logger.warning(f"[{tag}] No JSON array in reply, using fallback")
                return list(fallback)
            items = clean_strings(parsed)
            if not items:
                logger.warning(f"[{tag}] Empty array in reply, using fallback")
                return list(fallback)
            return fit_to_count(items, count, fallback)
        except Exception as e:
            logger.exception(f"[{tag}] Generation failed: {e}")
            return list(fallback)

    # ------------------ BINGO ------------------
    def bingo_missions(self, user: User, answers: Optional[Dict[str, Any]] = None) -> List[BingoMission]:
        """Nine personalised missions for one participant's board."""
        fallback = fallback_missions()
        logger.info(f"[BINGO] Generating missions for {user.name or user.id}")
        try:
            answer_lines = "\n".join(f"- {key}: {value}" for key, value in (answers or {}).items())
            prompt = BINGO_MISSIONS_PROMPT.format(
                profile=format_profile(user),
                answers=answer_lines or f"- {NO_ANSWER}",
            )
            text = self.text_client.complete(prompt, max_tokens=2048, temperature=0.8, top_p=0.95)
            parsed = extract_json_array(text)
            if parsed is None:
                logger.warning("[BINGO] No JSON array in reply, using fallback missions")
                return fallback
            missions = [m for m in (BingoMission.from_raw(raw) for raw in parsed) if m is not None]
            if not missions:
                logger.warning("[BINGO] No usable missions in reply, using fallback missions")
                return fallback
            logger.debug(f"[BINGO] Parsed {len(missions)} missions")
            return fit_to_count(missions, BOARD_SIZE, fallback)
        except Exception as e:
            logger.exception(f"[BINGO] Generation failed: {e}")
            return fallback

    # ------------------ SURVEY ------------------
    def survey_questions(self, event_name: str, count: int = 3, event_type: Optional[str] = None) -> List[str]:
        """Survey question suggestions for an event; count is clamped to 1..10."""
        count = max(1, min(int(count), MAX_SURVEY_QUESTIONS))
        fallback = FALLBACK_SURVEY_QUESTIONS[:count]
        logger.info(f"[SURVEY] {count} question(s) for '{event_name}' (type={event_type})")
        try:
            prompt = SURVEY_QUESTIONS_PROMPT.format(
                count=count,
                event_name=event_name,
                event_type_line=f"\nEvent type: {event_type}" if event_type else "",
            )
            text = self.text_client.complete(prompt, max_tokens=8192, temperature=1.0, top_p=0.95)
            parsed = extract_json_array(text)
            if parsed is None:
                logger.warning("[SURVEY] No JSON array in reply, using fallback questions")
                return fallback
            questions = clean_strings(parsed)
            if not questions:
                return fallback
            return fit_to_count(questions, count, FALLBACK_SURVEY_QUESTIONS)
        except Exception as e:
            logger.exception(f"[SURVEY] Generation failed: {e}")
            return fallback


def fallback_missions() -> List[BingoMission]:
    return [BingoMission.from_raw(m) for m in FALLBACK_MISSIONS]
