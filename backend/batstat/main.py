import logging
import time
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
load_dotenv()
from batstat.api.routes import players, games, stats, box_scores
from batstat.core.stat_aggregator import InvalidStatError
from batstat.services.errors import NotFoundError


logger = logging.getLogger(__name__)

app = FastAPI(title="BatStat API")

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):

    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time

    logger.info(f"PATH: {request.url.path} | TIME: {process_time * 1000:.2f} ms")

    response.headers["X-Process-Time-Sec"] = str(process_time)

    return response

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(InvalidStatError)
async def invalid_stat_handler(request: Request, exc: InvalidStatError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

app.include_router(players.router)
app.include_router(games.router)
app.include_router(stats.router)
app.include_router(box_scores.router)

@app.get("/")
def health_check():
    return {"status": "API is running", "project": "BatStat"}
