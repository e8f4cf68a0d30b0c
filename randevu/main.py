from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from randevu.database import Base, engine
from randevu.middleware import add_request_id_and_process_time
# Register every table on Base.metadata
from randevu.models import (  # noqa: F401
    appointment_model,
    favorite_model,
    notification_model,
    review_model,
    service_model,
    token_blacklist,
    user_model,
    working_hours_model,
)
from randevu.routes.user_route import user_router
from randevu.routes.service_route import service_router
from randevu.routes.working_hours_route import working_hours_router
from randevu.routes.appointment_route import appointment_router
from randevu.routes.review_route import review_router
from randevu.routes.notification_route import notification_router
from randevu.routes.favorite_route import favorite_router


Base.metadata.create_all(bind=engine)
app = FastAPI(
    title="Kuaför Randevu API",
    version="1.0.0",
    description="Appointment booking for barbers and salons: services, working hours, "
                "slot availability, appointment lifecycle, reviews, favorites and notifications.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(add_request_id_and_process_time)


@app.get("/", status_code=200)
async def home():
    return {"message": "Welcome to Kuaför Randevu API"}


app.include_router(user_router, prefix="/api", tags=["Users"])
app.include_router(service_router, prefix="/api", tags=["Services"])
app.include_router(working_hours_router, prefix="/api", tags=["Working Hours"])
app.include_router(appointment_router, prefix="/api", tags=["Appointments"])
app.include_router(review_router, prefix="/api", tags=["Reviews"])
app.include_router(notification_router, prefix="/api", tags=["Notifications"])
app.include_router(favorite_router, prefix="/api", tags=["Favorites"])
