"""Constants for interest tags, birth months, and gift suggestions."""

from enum import Enum


class Interest(str, Enum):
    """Enumeration of the interests an organizer can pick for the child."""

    art_and_crafting = "Art & Crafting"
    sports = "Sports"
    science = "Science"
    music = "Music"
    reading = "Reading"
    video_games = "Video Games"
    outdoor_activities = "Outdoor Activities"
    cooking = "Cooking"
    animals = "Animals"
    building_and_construction = "Building & Construction"


class BirthMonth(str, Enum):
    """Enumeration of birth months a guest can give for their child."""

    january = "January"
    february = "February"
    march = "March"
    april = "April"
    may = "May"
    june = "June"
    july = "July"
    august = "August"
    september = "September"
    october = "October"
    november = "November"
    december = "December"


GIFT_SUGGESTIONS = {
    Interest.art_and_crafting.value: ["Art supplies set", "Craft kit", "Drawing tablet"],
    Interest.sports.value: ["Sports equipment", "Team jersey", "Training gear"],
    Interest.science.value: ["Science kit", "Microscope", "Chemistry set"],
    Interest.music.value: ["Musical instrument", "Headphones", "Music lessons"],
    Interest.reading.value: ["Book series", "E-reader", "Bookstore gift card"],
    Interest.video_games.value: ["Video game", "Gaming accessory", "Gaming gift card"],
    Interest.outdoor_activities.value: ["Bike", "Scooter", "Outdoor games"],
    Interest.cooking.value: ["Kids cookbook", "Cooking kit", "Baking set"],
    Interest.animals.value: ["Stuffed animals", "Animal books", "Zoo membership"],
    Interest.building_and_construction.value: ["Building blocks", "Construction set", "Robot kit"],
}

# Party length used when no explicit end time exists
DEFAULT_PARTY_DURATION_HOURS = 2
