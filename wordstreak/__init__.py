"""
Wordstreak — Streaks, Badges & Streak Saves for a Word-of-the-Day Group
=========================================================================
Participants post a word or quote each day.  Wordstreak turns that
history into consecutive-day streaks, awards milestone badges, grants a
monthly streak save to active members, and serves leaderboard and
calendar views over a small REST API.

Package layout::

    wordstreak/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Badge emoji + labels
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   ├── models.py      # ORM models (6 tables)
    │   └── seed.py        # Roster seeder
    ├── engine/
    │   ├── dates.py       # Reference-timezone day / month arithmetic
    │   ├── streaks.py     # Current / longest streak calculation
    │   ├── badges.py      # Milestone ladder
    │   ├── streak_save.py # Monthly save allowance state machine
    │   ├── competition.py # Leaderboard statistics
    │   ├── mastery.py     # Word practice state machine
    │   └── cache.py       # In-memory participant cache
    ├── services/
    │   ├── streak_service.py      # Streak upsert, badge awards, saves
    │   ├── entry_service.py       # Entry creation + feed
    │   ├── competition_service.py # Competition + calendar read models
    │   └── mastery_service.py     # Problem-word practice
    └── api/
        ├── main.py        # FastAPI app
        └── routes/        # REST endpoints
"""

__version__ = "0.1.0"
