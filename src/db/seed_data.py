# Sample songs written to an empty store on first run.
SEED_SONGS = [
    {
        "id": "1",
        "name": "Amazing Grace",
        "composer": "John Newton",
        "lyrics": (
            "Amazing grace, how sweet the sound\n"
            "That saved a wretch like me.\n"
            "I once was lost, but now am found,\n"
            "Was blind, but now I see."
        ),
        "tags": ["hymn", "classic", "worship"],
        "demoText": "Demo song",
    },
    {
        "id": "2",
        "name": "How Great Thou Art",
        "composer": "Carl Boberg",
        "lyrics": (
            "O Lord my God, when I in awesome wonder\n"
            "Consider all the worlds Thy hands have made,\n"
            "I see the stars, I hear the rolling thunder,\n"
            "Thy power throughout the universe displayed."
        ),
        "tags": ["hymn", "worship", "traditional"],
        "demoText": "Demo song",
    },
    {
        "id": "3",
        "name": "It Is Well",
        "composer": "Horatio Spafford",
        "lyrics": (
            "When peace like a river attendeth my way,\n"
            "When sorrows like sea billows roll,\n"
            "Whatever my lot, Thou hast taught me to say,\n"
            "It is well, it is well with my soul."
        ),
        "tags": ["hymn", "peace", "classic"],
        "demoText": "Demo song",
    },
]
