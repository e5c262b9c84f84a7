"""
Alumni Portal – SQLAlchemy ORM models package.

Imports all model classes so the app and table creation can discover them
through a single ``from app.models import *`` import.
"""

from app.models.user import User                        # noqa: F401
from app.models.profile import Profile                  # noqa: F401
from app.models.activity_log import ActivityLog         # noqa: F401
from app.models.event import Event                      # noqa: F401
from app.models.event_suggestion import EventSuggestion # noqa: F401
from app.models.event_vote import EventVote             # noqa: F401
from app.models.event_comment import EventComment       # noqa: F401
from app.models.job import Job                          # noqa: F401
