import pytest

from enquest.models import BingoMission, Event, User
from enquest.prompts.icebreak_prompts import FALLBACK_QUESTIONS, FALLBACK_REVERSE_QUESTIONS, FALLBACK_TOPIC
from enquest.prompts.survey_prompts import FALLBACK_SURVEY_QUESTIONS
from enquest.services.content_generator import ContentGenerator, fallback_missions, format_event_answers
from tests.fakes import FakeTextClient

ALICE = User(id="alice", name="Alice", department="Sales", hobbies="climbing")
BOB = User(id="bob", name="Bob", department="Engineering")


def failing(prompt):
    return RuntimeError("model unavailable")


def replying(text):
    return lambda prompt: text


def test_topic_is_stripped_reply():
    generator = ContentGenerator(FakeTextClient(replying("  Ask about their weekend \n")))
    assert generator.icebreak_topic(ALICE, BOB) == "Ask about their weekend"


@pytest.mark.parametrize("responder", [failing, replying(""), replying("   ")])
def test_topic_falls_back(responder):
    generator = ContentGenerator(FakeTextClient(responder))
    assert generator.icebreak_topic(ALICE, BOB) == FALLBACK_TOPIC


def test_question_lists_fall_back_when_client_raises():
    generator = ContentGenerator(FakeTextClient(failing))
    assert generator.icebreak_questions(ALICE, BOB) == FALLBACK_QUESTIONS
    assert generator.reverse_questions(ALICE, BOB) == FALLBACK_REVERSE_QUESTIONS


def test_question_list_without_array_falls_back():
    generator = ContentGenerator(FakeTextClient(replying("I would ask about hobbies.")))
    assert generator.icebreak_questions(ALICE, BOB) == FALLBACK_QUESTIONS


def test_short_question_list_is_padded_to_five():
    generator = ContentGenerator(FakeTextClient(replying('["Ask one", "Ask two"]')))
    questions = generator.icebreak_questions(ALICE, BOB)
    assert len(questions) == 5
    assert questions[:2] == ["Ask one", "Ask two"]


def test_long_question_list_is_truncated():
    generator = ContentGenerator(FakeTextClient(replying(str([f"q{i}" for i in range(8)]).replace("'", '"'))))
    assert generator.icebreak_questions(ALICE, BOB) == ["q0", "q1", "q2", "q3", "q4"]


def test_prompt_carries_profiles_and_answers(text_client):
    event = Event.from_doc("ev1", {"surveyQuestions": [{"id": 1, "question": "Favourite song"}]})
    ContentGenerator(text_client).icebreak_topic(ALICE, BOB, {}, {"answer1": "Bohemian Rhapsody"}, event)
    prompt = text_client.calls[0]["prompt"]
    assert "Favourite song: Bohemian Rhapsody" in prompt
    assert "Hobbies: climbing" in prompt
    assert "Age: unknown" in prompt
    assert text_client.calls[0]["max_tokens"] == 512


def test_format_event_answers_marks_missing():
    event = Event.from_doc("ev1", {"surveyQuestions": [{"id": 1, "question": "A"}, {"id": 2, "question": "B"}]})
    assert format_event_answers({"answer2": "yes"}, event) == "Event survey answers:\n- A: no answer\n- B: yes"
    assert format_event_answers({"answer1": "x"}, None) == ""


def test_bingo_missions_always_nine():
    generator = ContentGenerator(FakeTextClient(replying('["Say hi", {"text": "Snap a photo", "type": "photo"}]')))
    missions = generator.bingo_missions(ALICE, {"answer1": "jazz"})
    assert len(missions) == 9
    assert missions[0] == BingoMission("Say hi", "conversation")
    assert missions[1] == BingoMission("Snap a photo", "photo")
    assert all(m.category in ("conversation", "photo", "discovery", "experience") for m in missions)


def test_bingo_missions_fall_back_on_error():
    generator = ContentGenerator(FakeTextClient(failing))
    assert generator.bingo_missions(ALICE) == fallback_missions()
    assert len(fallback_missions()) == 9


def test_bingo_missions_with_no_usable_entries_fall_back():
    generator = ContentGenerator(FakeTextClient(replying('[{"category": "photo"}, ""]')))
    assert generator.bingo_missions(ALICE) == fallback_missions()


def test_survey_questions_clamp_count(text_client):
    generator = ContentGenerator(text_client)
    assert len(generator.survey_questions("Offsite", count=50)) == 10
    assert len(generator.survey_questions("Offsite", count=0)) == 1
    assert text_client.calls[0]["temperature"] == 1.0
    assert text_client.calls[0]["max_tokens"] == 8192


def test_survey_questions_fall_back():
    generator = ContentGenerator(FakeTextClient(failing))
    assert generator.survey_questions("Offsite", count=4) == FALLBACK_SURVEY_QUESTIONS[:4]
