from typing import TypedDict

SavedPattern = TypedDict(
    "SavedPattern",
    {
        "name": str,
        "inhaleSeconds": int,
        "holdSeconds": int,
        "exhaleSeconds": int,
    },
)

SavedConfiguration = TypedDict(
    "SavedConfiguration",
    {
        "durationChoices": list[int],
        "defaultDuration": int,
        "patterns": list[SavedPattern],
        "defaultPattern": str,
    },
)
