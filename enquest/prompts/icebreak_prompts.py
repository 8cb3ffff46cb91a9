ICEBREAK_TOPIC_PROMPT = """Suggest one question {asker} could ask to get to know {partner}, phrased as a piece of conversation advice.

Reference information about {partner} (for internal analysis only):
{partner_profile}
{partner_answers}

Reference information about {asker} (for internal analysis only):
{asker_profile}
{asker_answers}

Requirements:
- Analyse the information above and suggest a question {partner} would enjoy answering
- NEVER include any of {partner}'s concrete details in the advice; {asker} should learn them by asking
- Phrase it as advice, e.g. "Try asking about ..."
- It must fit naturally into a casual conversation
- Keep it under 80 characters
- Reply with the advice only, no preamble

Example: "Try asking how they like to spend their weekends"
Example: "Ask whether they've picked up anything new recently"
"""

ICEBREAK_QUESTIONS_PROMPT = """Suggest 5 pieces of conversation advice that help {asker} deepen a conversation with {partner}.

Reference information about {partner} (for internal analysis only):
{partner_profile}
{partner_answers}

Reference information about {asker} (for internal analysis only):
{asker_profile}
{asker_answers}

Requirements:
- Analyse the information above and suggest topics or questions {partner} is likely to be interested in
- NEVER include any of {partner}'s concrete details in the advice; {asker} should learn them by asking
- Phrase each item as advice, e.g. "Try asking about ..." or "Ask how they feel about ..."
- Use common ground between the two to make the conversation flow naturally
- Prefer topics {partner} will find easy to talk about
- Answer in JSON format: ["...", "...", "...", "...", "..."]

Example: ["Ask what they enjoy most about their hobbies", "Talk about how you each spend your days off", "Ask whether anything has caught their interest lately"]
"""

REVERSE_QUESTIONS_PROMPT = """Suggest 5 pieces of conversation advice that help {speaker} start talking to {listener} on their own initiative.

Profile of {listener}:
{listener_profile}
{listener_answers}

Profile of {speaker}:
{speaker_profile}
{speaker_answers}

Requirements:
- Analyse both profiles and suggest things about {speaker} themself that {listener} is likely to find interesting
- Look for common ground or connections that make a natural conversation starter
- NEVER include any of {listener}'s concrete details in the advice
- Phrase each item as advice, e.g. "Try talking about ..." or "Introduce ..."
- Every item must be something {speaker} can bring up proactively
- Answer in JSON format: ["...", "...", "...", "...", "..."]

Example: ["Talk about your own hobbies", "Share how you usually spend your weekends", "Tell them about something you've been into lately"]
"""

FALLBACK_TOPIC = "Why not talk about how you each like to spend your days off?"

FALLBACK_QUESTIONS = [
    "Ask what they find most rewarding or fun about their work",
    "Ask how they like to spend their weekends or recharge",
    "Talk about anything new you've each discovered or got into lately",
    "Swap stories about where you grew up or places you've travelled",
    "Ask what they value most in their work and what they're aiming for",
]

FALLBACK_REVERSE_QUESTIONS = [
    "Try talking about your own hobbies",
    "Share how you usually spend your days off",
    "Tell them about something you've been into lately",
    "Talk about what you enjoy about your work",
    "Recommend a favourite food or restaurant of yours",
]
