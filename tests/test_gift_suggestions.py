from birthday_rsvp.constants.constants import GIFT_SUGGESTIONS, Interest
from birthday_rsvp.services.GiftSuggestions import suggest_gifts


def test_unknown_interest_contributes_nothing():
    assert suggest_gifts(["Music", "Unknown"]) == ["Musical instrument", "Headphones", "Music lessons"]


def test_concatenates_in_input_order():
    assert suggest_gifts(["Cooking", "Sports"]) == (
        GIFT_SUGGESTIONS["Cooking"] + GIFT_SUGGESTIONS["Sports"]
    )


def test_repeated_interest_is_not_deduplicated():
    assert suggest_gifts(["Music", "Music"]) == GIFT_SUGGESTIONS["Music"] * 2


def test_accepts_enum_members():
    assert suggest_gifts([Interest.animals]) == ["Stuffed animals", "Animal books", "Zoo membership"]


def test_empty_interests():
    assert suggest_gifts([]) == []


def test_every_interest_has_suggestions():
    for interest in Interest:
        assert GIFT_SUGGESTIONS[interest.value]
