BINGO_MISSIONS_PROMPT = """You are planning a bingo game for a corporate event. Based on the participant's profile and survey answers, generate 9 bingo missions tailored to them.

Participant:
{profile}

Survey answers:
{answers}

Requirements:
- Generate exactly 9 missions
- Missions should encourage participants to interact with each other
- Personalise them using the profile information
- Output a JSON array of objects in the format shown below

Mission categories:
1. conversation: "Talk to someone who ...", "Ask someone about ..."
2. photo: "Take a photo with someone who ...", "Take a photo of ..."
3. discovery: "Find someone who ...", "Discover who ..."
4. experience: "Do ... together", "Get someone to teach you ..."

Output format:
[{{"text": "Talk to someone from your own department", "category": "conversation"}}, {{"text": "Take a selfie with someone who shares your hobby", "category": "photo"}}, {{"text": "Find someone from your hometown", "category": "discovery"}}]

category values: "conversation", "photo", "discovery", "experience"
"""

FALLBACK_MISSIONS = [
    {"text": "Talk to someone from your own department", "category": "conversation"},
    {"text": "Take a selfie with someone who shares your hobby", "category": "photo"},
    {"text": "Find someone from your hometown", "category": "discovery"},
    {"text": "Talk to someone who loves the same food as you", "category": "conversation"},
    {"text": "Take a photo with someone your age", "category": "photo"},
    {"text": "Find someone who has a pet", "category": "discovery"},
    {"text": "Talk to someone who loves travelling abroad", "category": "conversation"},
    {"text": "Strike a pose with someone who loves sport", "category": "photo"},
    {"text": "Talk about books with a fellow reader", "category": "conversation"},
]
