# app/schemas/__init__.py
from .availability import (
    TimeInterval,
    WeeklyScheduleRequest,
    ExceptionCreateRequest,
    ExceptionUpdateRequest,
    ClosedMonthsRequest,
    BlockedDateCreateRequest,
    BlockedDateUpdateRequest
)

from .appointment_type import (
    AppointmentTypeCreate,
    AppointmentTypeUpdate
)

from .booking import (
    BookingCreateRequest,
    BookingRescheduleRequest
)

from .user import (
    UserCreateRequest,
    UserSettingsUpdate
)
