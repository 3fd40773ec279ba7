from __future__ import annotations
import json
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

import config
import crud
import database
import errors
from database import serialize
from uploads import store_image

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)
access_logger = logging.getLogger("access")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-DNS-Prefetch-Control": "off",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await run_in_threadpool(database.ping)
        logger.info("MongoDB connected")
    except Exception as e:
        logger.error("MongoDB connection error: %s", e)
    yield
    database.close_db()


app = FastAPI(title="Play Center Booking API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def unhandled_error_response(request: Request) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "An unexpected error occurred!"})


# Innermost, so error responses still pass the header and access-log middleware
@app.middleware("http")
async def catch_unhandled(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        return unhandled_error_response(request)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    client = request.client.host if request.client else "-"
    access_logger.info(
        '%s "%s %s" %s %.1fms',
        client, request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response


app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    return unhandled_error_response(request)


def message(status_code: int, text: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": text})


async def json_body(request: Request) -> Any:
    # an empty body reads as {}; malformed JSON is left to catch_unhandled
    raw = await request.body()
    return json.loads(raw) if raw else {}


@app.get("/")
async def root():
    return {"message": "Play Center Booking API running"}


@app.get("/test")
def test_db():
    try:
        return {
            "backend": "fastapi",
            "database": "mongodb",
            "database_name": config.DATABASE_NAME,
            "connection_status": "ok",
            "collections": database.get_db().list_collection_names(),
        }
    except Exception as e:
        logger.error("Database check failed: %s", e)
        return {"backend": "fastapi", "database": "mongodb", "connection_status": f"error: {e}"}


# ============== CATEGORIES ==================
@app.post("/api/categories")
async def add_category(request: Request):
    body = await json_body(request)
    try:
        category = await run_in_threadpool(crud.create_category, body)
    except errors.ApiError as e:
        logger.error("Error adding category: %s", e)
        return message(500, e.message)
    return JSONResponse(status_code=201, content=serialize(category))


@app.get("/api/categories")
async def list_categories():
    try:
        categories = await run_in_threadpool(crud.list_categories)
    except Exception as e:
        logger.error("Error fetching categories: %s", e)
        return message(500, str(e))
    return [serialize(c) for c in categories]


# ============== GAMES ==================
@app.get("/api/games/category/{category_id}")
async def games_by_category(category_id: str):
    try:
        games = await run_in_threadpool(crud.find_games_by_category, category_id)
    except errors.NotFound as e:
        return message(404, e.message)
    except Exception as e:
        logger.error("Error fetching games: %s", e)
        return message(500, "Error fetching games.")
    return [serialize(g) for g in games]


@app.get("/api/games/last-id")
async def last_game_id():
    try:
        last_id = await run_in_threadpool(crud.find_last_game_id)
    except Exception as e:
        logger.error("Error fetching last game ID: %s", e)
        return message(500, "Error fetching last game ID")
    return {"lastId": last_id}


@app.post("/api/games")
async def add_game(
    image: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    categoryIds: Optional[str] = Form(None),
    game_id: Optional[str] = Form(None, alias="id"),
):
    try:
        image_url = await store_image(image)
        game = await run_in_threadpool(crud.create_game, name, image_url, categoryIds, game_id=game_id)
    except errors.ApiError as e:
        logger.error("Error adding game: %s", e)
        return message(500, e.message)
    return JSONResponse(status_code=201, content=serialize(game))


@app.get("/api/games")
async def list_games():
    try:
        games = await run_in_threadpool(crud.list_games)
    except Exception as e:
        logger.error("Error fetching games: %s", e)
        return message(500, str(e))
    return [serialize(g) for g in games]


# ============== RESERVATIONS ==================
@app.post("/api/reservations")
async def add_reservation(request: Request):
    body = await json_body(request)
    try:
        reservation = await run_in_threadpool(crud.create_reservation, body)
    except errors.ApiError as e:
        logger.error("Error saving reservation: %s", e)
        return message(500, e.message)
    return JSONResponse(status_code=201, content=serialize(reservation))


@app.get("/api/reservations")
async def list_reservations():
    try:
        reservations = await run_in_threadpool(crud.list_reservations)
    except Exception as e:
        logger.error("Error fetching reservations: %s", e)
        return message(500, str(e))
    return [serialize(r) for r in reservations]


@app.patch("/api/reservations/{reservation_id}/status")
async def update_status(reservation_id: str, request: Request):
    body = await json_body(request)
    try:
        reservation = await run_in_threadpool(crud.update_reservation_status, reservation_id, body)
    except errors.NotFound as e:
        return message(404, e.message)
    except Exception as e:
        logger.error("Error updating reservation status: %s", e)
        return message(500, str(e))
    return serialize(reservation)


@app.patch("/api/reservations/{reservation_id}/userstatus")
async def update_user_status(reservation_id: str, request: Request):
    body = await json_body(request)
    try:
        reservation = await run_in_threadpool(crud.update_reservation_user_status, reservation_id, body)
    except errors.NotFound as e:
        return message(404, e.message)
    except Exception as e:
        logger.error("Error updating reservation: %s", e)
        return message(500, "Server error")
    return serialize(reservation)


@app.patch("/api/reservations/{reservation_id}/review")
async def update_review(reservation_id: str, request: Request):
    body = await json_body(request)
    try:
        reservation = await run_in_threadpool(crud.update_reservation_review, reservation_id, body)
    except errors.NotFound as e:
        return message(404, e.message)
    except Exception as e:
        logger.error("Error updating reservation review: %s", e)
        return message(500, "Server error")
    return serialize(reservation)


if __name__ == "__main__":
    import uvicorn

    logger.info("Server is running on http://localhost:%s", config.PORT)
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
