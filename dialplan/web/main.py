import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from dialplan import __version__, config
from dialplan.core.exceptions import (
    CaptureLengthMismatchError,
    DialplanError,
    NoMatchError,
    TelcoExpressionError,
)
from dialplan.core.logging import configure_logging
from dialplan.routing.models import Direction, OutboundRoutePlan
from dialplan.routing.rules import DialPlan, load_dial_plan
from dialplan.telco.expression import TelcoExpressionParser
from dialplan.telco.transformer import AddressTransformer
from dialplan.web.api_models import (
    ClassificationModel,
    ErrorCode,
    ErrorResponse,
    MatchRequest,
    MatchResponse,
    RoutePlanResponse,
    RouteRequest,
    TransformRequest,
    TransformResponse,
)

configure_logging(log_file=config.LOG_FILE or None, log_level=config.LOG_LEVEL)
log = logging.getLogger("dialplan")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Rules are compiled once at startup; a broken rules file stops the service
    for issue in config.validate_config():
        log.warning(f"config issue: {issue}")
    if config.RULES_FILE:
        app.state.dial_plan = load_dial_plan(config.RULES_FILE)
    else:
        log.warning("DIALPLAN_RULES_FILE not set; /route is unavailable")
        app.state.dial_plan = None
    yield


app = FastAPI(title="Dialplan", version=__version__, lifespan=lifespan)

parser = TelcoExpressionParser()


def get_dial_plan(request: Request) -> Optional[DialPlan]:
    return getattr(request.app.state, "dial_plan", None)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(code=code, message=message).model_dump(),
    )


@app.exception_handler(TelcoExpressionError)
async def pattern_error_handler(request: Request, exc: TelcoExpressionError):
    return _error(400, exc.code, exc.message)


@app.exception_handler(NoMatchError)
@app.exception_handler(CaptureLengthMismatchError)
async def transform_error_handler(request: Request, exc: DialplanError):
    return _error(422, exc.code, exc.message)


@app.middleware("http")
async def req_log(request: Request, call_next):
    start = time.time()
    route = request.url.path
    remote = request.client.host if request.client else "-"
    resp = await call_next(request)
    duration_ms = int((time.time() - start) * 1000)
    log.info(f"request_complete status={resp.status_code} duration_ms={duration_ms}",
             extra={"request_id": "-", "route": route, "remote_addr": remote})
    return resp


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.post("/match", response_model=MatchResponse)
def match_number(req: MatchRequest):
    """Match a number against a telco expression."""
    result = parser.match_result(req.pattern, req.input)
    return MatchResponse(matched=result.matched, groups=list(result.groups), rest=result.rest)


@app.post("/transform", response_model=TransformResponse)
def transform_number(req: TransformRequest):
    """Reformat a number through an output template."""
    transformer = AddressTransformer(strict=req.strict)
    return TransformResponse(result=transformer.transform(req.input, req.pattern, req.template))


@app.post("/route", response_model=RoutePlanResponse)
def route_number(req: RouteRequest, dial_plan: Optional[DialPlan] = Depends(get_dial_plan)):
    """Route a destination through the configured dial plan."""
    if dial_plan is None:
        return _error(503, ErrorCode.DIALPLAN_UNAVAILABLE, "No dial plan is configured")

    plan = dial_plan.route(req.destination, req.sender, direction=req.direction)
    if plan is None:
        return _error(404, ErrorCode.NO_ROUTE, f"No route for destination {req.destination}")

    direction = Direction.OUTBOUND if isinstance(plan, OutboundRoutePlan) else Direction.INBOUND
    return RoutePlanResponse(
        id=plan.id,
        direction=direction,
        classification=ClassificationModel(
            name=plan.classification.name,
            code=plan.classification.code,
        ),
        is_authorized=plan.is_authorized,
        destination_endpoint=plan.destination_endpoint,
        transformed_address=plan.transformed_address,
        destination_host=plan.destination_host,
    )
