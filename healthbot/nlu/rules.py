"""Rule-based topic matching for the canned-answer path.

STATIC_TOPICS is ordered: the first keyword found in the lowercased message wins.
"""
from typing import List, NamedTuple, Optional

CONSULT = "Please consult with a qualified healthcare professional for personalized medical advice."


class StaticTopic(NamedTuple):
    keyword: str
    message: str
    image_search_term: str


STATIC_TOPICS: List[StaticTopic] = [
    StaticTopic(
        "headache",
        "Headaches can have various causes including stress, dehydration, lack of sleep, or tension. "
        "For mild headaches, try resting in a quiet, dark room, applying a cool compress to your forehead, "
        "staying hydrated, and practicing relaxation techniques. If headaches are severe, frequent, or "
        "accompanied by other concerning symptoms, please consult with a qualified healthcare professional "
        "for personalized medical advice.",
        "headache relief techniques",
    ),
    StaticTopic(
        "fever",
        "Fever is your body's natural response to infection. For management: get plenty of rest, stay "
        "well-hydrated with water and clear fluids, dress lightly, and consider over-the-counter fever "
        "reducers if appropriate for your age and health status. Monitor your temperature regularly. Seek "
        "immediate medical attention if fever is very high (over 103°F/39.4°C), persists for more than 3 "
        "days, or is accompanied by severe symptoms. " + CONSULT,
        "fever management thermometer",
    ),
    StaticTopic(
        "exercise",
        "Regular physical activity is excellent for your overall health! Aim for at least 150 minutes of "
        "moderate aerobic activity per week, plus strength training exercises twice a week. Start slowly if "
        "you're new to exercise and gradually increase intensity. Choose activities you enjoy - walking, "
        "swimming, cycling, dancing, or sports. Always listen to your body and rest when needed. If you have "
        "any health conditions or concerns about starting an exercise program, please consult with a "
        "qualified healthcare professional for personalized medical advice.",
        "people exercising healthy lifestyle",
    ),
    StaticTopic(
        "diet",
        "A balanced diet is fundamental to good health! Focus on eating a variety of colorful fruits and "
        "vegetables, whole grains, lean proteins, and healthy fats. Limit processed foods, excessive sugar, "
        "and sodium. Stay hydrated with plenty of water throughout the day. Practice portion control and "
        "mindful eating. Remember that small, sustainable changes often work better than drastic dietary "
        "overhauls. For specific dietary needs or medical conditions, please consult with a qualified "
        "healthcare professional for personalized medical advice.",
        "healthy balanced diet colorful foods",
    ),
]

GENERIC_TOPIC = StaticTopic(
    "",
    "Thank you for your question! I'm here to help with general health information and wellness tips. "
    "I can provide guidance on topics like nutrition, exercise, sleep, stress management, and general "
    "health practices. However, for specific medical concerns, symptoms, or treatment decisions, please "
    "consult with a qualified healthcare professional for personalized medical advice.",
    "healthcare consultation doctor patient",
)


def match_static_topic(query: str) -> Optional[StaticTopic]:
    q = query.lower()
    for topic in STATIC_TOPICS:
        if topic.keyword in q:
            return topic
    return None


def has_static_topic(query: str) -> bool:
    return match_static_topic(query) is not None
