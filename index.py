import logging
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from config import get_settings
from methods import get_method
from models import GeoCoordinate, InvalidCoordinate, UnknownMethodError
from next_event import countdown, evaluate
from prayer_times import compute_prayer_times, format_schedule
from qibla import qibla_direction
from ramadan_calendar import RAMADAN_2026_START, RAMADAN_DAYS, project_calendar

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="API service for calculating prayer times, Sehri/Iftar countdowns and the Ramadan calendar",
    version=settings.APP_VERSION,
)


@app.exception_handler(InvalidCoordinate)
async def invalid_coordinate_handler(request: Request, exc: InvalidCoordinate):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(UnknownMethodError)
async def unknown_method_handler(request: Request, exc: UnknownMethodError):
    return JSONResponse(status_code=400, content={"detail": exc.args[0]})


@app.get("/")
def root():
    return {
        "service": settings.APP_NAME,
        "status": "online",
        "endpoints": {
            "/api/timesForGPS": "Get prayer times for GPS coordinates",
            "/api/nextEvent": "Get the next Sehri/Iftar boundary and countdown",
            "/api/ramadanCalendar": "Get the Sehri/Iftar table for Ramadan",
            "/api/qibla": "Get the Qibla direction",
        },
    }


def _coordinate(lat: float | None, lng: float | None) -> GeoCoordinate:
    # Missing location falls back to the configured default
    if lat is None or lng is None:
        return settings.default_coordinate()
    return GeoCoordinate(latitude=lat, longitude=lng)


def _parse_date(value: str):
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=422, detail="date must be YYYY-MM-DD")


@app.get("/api/timesForGPS")
def get_times_for_gps(
    date: str,
    lat: float | None = None,
    lng: float | None = None,
    days: int = Query(1, ge=1, le=366),
    timezoneOffset: int = settings.TIMEZONE_OFFSET_MINUTES,  # Minutes east of UTC, e.g. 360
    calculationMethod: str = settings.CALCULATION_METHOD,
):
    coord = _coordinate(lat, lng)
    method = get_method(calculationMethod)
    start_date = _parse_date(date)

    response_times = {}

    for i in range(days):
        current_day = start_date + timedelta(days=i)
        date_key = current_day.strftime("%Y-%m-%d")
        times = format_schedule(compute_prayer_times(current_day, coord, method), timezoneOffset)

        # [0]: Imsak, [1]: Fajr, [2]: Sunrise, [3]: Dhuhr, [4]: Asr, [5]: Maghrib,
        # [6]: Isha, [7]: Middle of the night, [8]: Last third of the night
        response_times[date_key] = [
            times["imsak"],
            times["fajr"],
            times["sunrise"],
            times["dhuhr"],
            times["asr"],
            times["maghrib"],
            times["isha"],
            times["midnight"],
            times["last_third"],
        ]

    return {"times": response_times}


@app.get("/api/nextEvent")
def get_next_event(
    lat: float | None = None,
    lng: float | None = None,
    now: str | None = None,
    calculationMethod: str = settings.CALCULATION_METHOD,
):
    coord = _coordinate(lat, lng)
    method = get_method(calculationMethod)
    if now is None:
        instant = datetime.now(timezone.utc)
    else:
        try:
            # fromisoformat only accepts a trailing Z from Python 3.11
            instant = datetime.fromisoformat(now.replace("Z", "+00:00"))
        except ValueError:
            raise HTTPException(status_code=422, detail="now must be an ISO 8601 timestamp")
        # A timestamp without an offset is taken as UTC
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)

    event = evaluate(instant, coord, method)
    remaining = countdown(instant, event)
    return {
        "kind": event.kind.value,
        "at": event.at.isoformat(),
        "remainingSeconds": remaining.remaining_seconds,
        "hours": remaining.hours,
        "minutes": remaining.minutes,
        "seconds": remaining.seconds,
    }


@app.get("/api/ramadanCalendar")
def get_ramadan_calendar(
    lat: float | None = None,
    lng: float | None = None,
    start: str = RAMADAN_2026_START.isoformat(),
    days: int = Query(RAMADAN_DAYS, ge=1, le=366),
    timezoneOffset: int = settings.TIMEZONE_OFFSET_MINUTES,
    calculationMethod: str = settings.CALCULATION_METHOD,
):
    coord = _coordinate(lat, lng)
    method = get_method(calculationMethod)
    rows = []
    for entry in project_calendar(_parse_date(start), days, coord, method):
        times = format_schedule(entry.schedule, timezoneOffset)
        rows.append({
            "day": entry.index,
            "date": entry.date.isoformat(),
            "sehri": times["imsak"],
            "iftar": times["maghrib"],
        })
    return {"calendar": rows}


@app.get("/api/qibla")
def get_qibla(lat: float | None = None, lng: float | None = None):
    coord = _coordinate(lat, lng)
    return {"direction": round(qibla_direction(coord), 2)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("index:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
