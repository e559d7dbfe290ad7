from typing import Iterable, List

from birthday_rsvp.constants.constants import GIFT_SUGGESTIONS


def suggest_gifts(interests: Iterable[str]) -> List[str]:
    """
    Expand interests into gift ideas, in the order the interests were given.

    Unknown interests add nothing and repeated ideas are kept as they are.
    """
    suggestions = []
    for interest in interests:
        key = interest.value if hasattr(interest, "value") else interest
        suggestions.extend(GIFT_SUGGESTIONS.get(key, []))
    return suggestions
