from rosterapp.models.base import Base  # noqa: F401
from rosterapp.models.calendar import Availability, AvailabilityStatus, CalendarEvent, EventType  # noqa: F401
from rosterapp.models.game_plan import GamePlan, GamePlanPlayer  # noqa: F401
from rosterapp.models.map import Map  # noqa: F401
from rosterapp.models.user import User, UserRole, UserSession  # noqa: F401
