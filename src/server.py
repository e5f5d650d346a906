import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, Response
from fastapi.responses import ORJSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from config.config import Config
from config.logging_config import setup_logging
from contracts.probe import ProbeOutcome
from contracts.race import RaceResult
from contracts.tester_config import TesterConfig
from core.errors import RaceConfigurationError
from core.http_transport import HttpxTransport
from core.logging_observer import LoggingObserver
from core.metrics_observer import MetricsObserver
from core.speed_tester import ApiSpeedTester

setup_logging()
logger = logging.getLogger(__name__)

client = httpx.AsyncClient()
transport = HttpxTransport(client)
metrics_observer = MetricsObserver()
# Races keep running after /fastest has answered
_background = set()


def tester_for(config: Optional[TesterConfig]) -> ApiSpeedTester:
    config = config or Config.tester_config()
    observers = [LoggingObserver(config.test_path, config.timeout_ms), metrics_observer]
    return ApiSpeedTester(config, transport=transport, observers=observers)


@asynccontextmanager
async def lifespan(app):
    yield
    for task in list(_background):
        task.cancel()
    await client.aclose()


app = FastAPI(lifespan=lifespan, default_response_class=ORJSONResponse)


@app.post("/race", response_model=RaceResult)
async def run_race(config: Optional[TesterConfig] = None):
    tester = tester_for(config)
    try:
        return await tester.test_concurrent_with_fastest()
    except RaceConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/fastest", response_model=Optional[ProbeOutcome])
async def fastest_route(config: Optional[TesterConfig] = None):
    tester = tester_for(config)
    try:
        fastest, remaining = await tester.get_best_route_with_continuous_testing()
    except RaceConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    task = asyncio.ensure_future(remaining)
    _background.add(task)
    task.add_done_callback(_background.discard)
    return fastest


@app.get("/metrics")
def metrics():
    return Response(generate_latest(metrics_observer.registry), media_type=CONTENT_TYPE_LATEST)
