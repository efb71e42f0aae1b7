# barberbook/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from barberbook.config import settings
from barberbook.db import init_db
from barberbook.exceptions import BookingError
from barberbook.routers import appointments_routes, barbers_routes, shops_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.include_router(shops_routes.router)
app.include_router(barbers_routes.router)
app.include_router(appointments_routes.router)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    http_exc = exc.to_http_exception()
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


@app.get("/health")
def health_check():
    return {"status": "ok"}
