"""Game constants for the Big Two scoreboard."""

# Table
SEAT_COUNT = 4
MAX_CARDS = 13  # cards dealt per player

# Card-count multipliers for penalty scoring (cards left in hand at round end)
# 1-7 cards = face value, 8-9 = x2, 10-12 = x3, 13 = x4
CARD_MULTIPLIERS = (
    (13, 4),
    (10, 3),
    (8, 2),
    (0, 1),
)

# Elimination rules
ELIMINATION_STEP = 50
ONE_SHOT_THRESHOLD = 25

RULE_STEP = "50"
RULE_ONE_SHOT = "25"

# Engine events
EVENT_GAME_CREATED = "game_created"
EVENT_GAME_RENAMED = "game_renamed"
EVENT_GAME_DELETED = "game_deleted"
EVENT_ROUND_CONFIRMED = "round_confirmed"
EVENT_ROUND_DELETED = "round_deleted"
EVENT_ROTATION = "rotation"

# Keys probed for a round timestamp
TIMESTAMP_KEYS = ("timestamp", "time", "ts", "t", "date")
