from fastapi import APIRouter

from scholarstream.modules.applications.router import router as applications_router
from scholarstream.modules.payments.router import router as payments_router
from scholarstream.modules.reviews.router import router as reviews_router
from scholarstream.modules.scholarships.router import router as scholarships_router
from scholarstream.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(scholarships_router, prefix="/scholarships", tags=["Scholarships"])

api_router.include_router(reviews_router, prefix="/reviews", tags=["Reviews"])

api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])

# Payment routes are served at the root (/create-checkout-session, /webhooks/stripe, ...)
api_router.include_router(payments_router, tags=["Payments"])
