import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nagoyameshi.auth.deps import GuardRedirect
from nagoyameshi.core.config import settings
from nagoyameshi.core.responses import redirect
from nagoyameshi.routers import (
    admin,
    admin_auth,
    admin_restaurants,
    auth,
    favorites,
    home,
    reservations,
    restaurants,
    reviews,
    subscription,
    user,
)
from nagoyameshi.services.billing import BillingError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("nagoyameshi")

app = FastAPI(title="NAGOYAMESHI API")

origins = settings.cors_origins()
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(GuardRedirect)
def guard_redirect_handler(request: Request, exc: GuardRedirect):
    return redirect(exc.decision.target, error=exc.decision.message)


@app.exception_handler(BillingError)
def billing_error_handler(request: Request, exc: BillingError):
    log.warning("billing failure path=%s code=%s: %s", request.url.path, exc.code, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc), "code": exc.code})


app.include_router(home.router)
app.include_router(auth.router)
app.include_router(user.router)
app.include_router(restaurants.router)
app.include_router(reviews.router)
app.include_router(reservations.router)
app.include_router(favorites.router)
app.include_router(subscription.router)
app.include_router(admin_auth.router)
app.include_router(admin.router)
app.include_router(admin_restaurants.router)


@app.get("/health")
def health():
    return {"status": "ok"}
