SURVEY_QUESTIONS_PROMPT = """You are the organiser of a corporate event.
Suggest {count} survey questions to send out before the event "{event_name}" to help participants connect with each other.{event_type_line}

Purpose of the survey:
- Learn participants' interests and hobbies before the event
- Make it easier for participants to find things they have in common
- Create conversation starters for the day itself

Constraints:
- Generate exactly {count} questions
- Keep every question short and easy to answer
- Make them fun to answer
- Answer as a JSON array where each element is a question string

Example: ["Favourite food", "Something you're into lately", "How you spend your days off"]
"""

FALLBACK_SURVEY_QUESTIONS = [
    "Favourite food",
    "Something you're into lately",
    "How you spend your days off",
    "Favourite music genre",
    "A place you'd like to travel to",
    "Club or team you were in at school",
    "A book you read recently",
    "How you blow off steam",
    "Favourite sport",
    "Something you want to try this year",
]

DEFAULT_EVENT_SURVEY = [
    {"id": 1, "question": "A song you've been listening to a lot lately"},
    {"id": 2, "question": "Something you're into lately"},
]
