from letsgo.api.v1.account_router import router as account_router
from letsgo.api.v1.auth_router import router as auth_router
from letsgo.api.v1.contact_router import router as contact_router
from letsgo.api.v1.events_router import router as events_router
from letsgo.api.v1.my_events_router import router as my_events_router
from letsgo.api.v1.profile_router import router as profile_router

__all__ = [
    "account_router",
    "auth_router",
    "contact_router",
    "events_router",
    "my_events_router",
    "profile_router",
]
