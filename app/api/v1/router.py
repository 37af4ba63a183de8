"""
API v1 router setup
Organized into: public (customer facing) and owner routes keyed by user_id
"""
from fastapi import APIRouter

from app.api.v1.public import slots, bookings as public_bookings
from app.api.v1.dashboard import users, availability, appointment_types, bookings

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (customers choosing and booking slots)
# ============================================================================
api_v1_router.include_router(
    slots.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    public_bookings.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# OWNER ROUTES (business owner settings, hours and bookings)
# ============================================================================
api_v1_router.include_router(
    users.router,
    prefix="/users",
    tags=["Owner"]
)

api_v1_router.include_router(
    availability.router,
    prefix="/users",
    tags=["Owner"]
)

api_v1_router.include_router(
    appointment_types.router,
    prefix="/users",
    tags=["Owner"]
)

api_v1_router.include_router(
    bookings.router,
    prefix="/users",
    tags=["Owner"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "endpoints": {
            "public": ["/public/slots", "/public/slots/range", "/public/bookings"],
            "owner": "/users/{user_id}/..."
        }
    }
