# Mall Parking — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User                   # noqa
from app.models.mall import Mall                   # noqa
from app.models.parking_slot import ParkingSlot    # noqa
from app.models.slot_booking import SlotBooking    # noqa
