"""Shippo Slot FastAPI Application."""
import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request

from shippo_slot.catalog_hash import get_catalog_hash
from shippo_slot.config import settings
from shippo_slot.errors import ErrorCode, GameError
from shippo_slot.logic.catalog import POOL_KEYS, load_catalog
from shippo_slot.logic.controller import SpinController
from shippo_slot.logic.input import KeyboardInput
from shippo_slot.logic.models import RoundState
from shippo_slot.logic.presenter import (
    CompositePresenter,
    LoggingPresenter,
    RecordingPresenter,
)
from shippo_slot.logic.rng import ProductionRNG, RNGBase, SeededRNG
from shippo_slot.middleware import ErrorHandlerMiddleware, SessionIdMiddleware
from shippo_slot.protocol import (
    CatalogResponse,
    CommandResponse,
    EventType,
    InputRequest,
    ItemView,
    SessionState,
)
from shippo_slot.redis_service import redis_service
from shippo_slot.telemetry import (
    CommandRejectedEvent,
    RoundCompletedEvent,
    RoundStartedEvent,
    telemetry_service,
)
from shippo_slot.validators import validate_input_request, validate_reel_index


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage Redis connection lifecycle."""
    await redis_service.connect()
    yield
    await redis_service.close()


app = FastAPI(
    title="Shippo Slot",
    version="0.1.0",
    description="Three-reel sentence slot machine for Japanese practice",
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(SessionIdMiddleware)

# Catalog integrity errors surface here, at startup
catalog = load_catalog(settings.catalog_path)
catalog_hash = get_catalog_hash(catalog)

rng: RNGBase = SeededRNG(settings.rng_seed) if settings.rng_seed is not None else ProductionRNG()


def _load_controller(
    state_data: dict | None, presenter: RecordingPresenter | None = None
) -> SpinController:
    """Rebuild a session's controller from persisted round state."""
    round_state = RoundState.model_validate(state_data) if state_data else None
    presenters = [LoggingPresenter()]
    if presenter is not None:
        presenters.insert(0, presenter)
    return SpinController(
        catalog,
        presenter=CompositePresenter(presenters),
        rng=rng,
        round_state=round_state,
    )


def _state_view(controller: SpinController) -> SessionState:
    return SessionState.from_round(controller.round_state, controller.status.value)


def _emit_round_telemetry(
    session_id: str, controller: SpinController, recorder: RecordingPresenter
) -> None:
    """Emit round_started / round_completed for what this command did."""
    state = controller.round_state
    if recorder.get_events(EventType.ROUND_START):
        telemetry_service.emit_round_started(
            RoundStartedEvent(session_id=session_id, round_id=state.round_id)
        )
    if recorder.get_events(EventType.OUTCOME):
        telemetry_service.emit_round_completed(
            RoundCompletedEvent(
                session_id=session_id,
                round_id=state.round_id,
                outcome=state.outcome.kind.value,
                grade=state.outcome.grade,
                reach_triggered=state.reach_triggered,
                landed=[item.spoken_form for item in state.landed_items()],
                catalog_hash=catalog_hash,
            )
        )


async def _run_command(
    session_id: str, command: str, action: Callable[[SpinController], bool]
) -> dict:
    """
    Run one controller command for a session.

    Implements:
    - Per-session locking (SESSION_BUSY on concurrent commands)
    - Round state load/save in Redis
    - Presenter events of this command, in order, in the response
    """
    try:
        async with redis_service.session_lock(session_id):
            state_data = await redis_service.get_session_state(session_id)
            recorder = RecordingPresenter()
            controller = _load_controller(state_data, recorder)

            accepted = action(controller)

            await redis_service.save_session_state(
                session_id, controller.round_state.model_dump(mode="json")
            )
            _emit_round_telemetry(session_id, controller, recorder)

            return CommandResponse(
                accepted=accepted,
                events=recorder.events,
                state=_state_view(controller),
            ).model_dump()

    except GameError as e:
        if e.code == ErrorCode.SESSION_BUSY:
            logger.info("Command %s rejected: session %s busy", command, session_id)
            telemetry_service.emit_command_rejected(
                CommandRejectedEvent(
                    session_id=session_id,
                    command=command,
                    reason=e.code.value,
                )
            )
        raise


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/catalog")
async def get_catalog() -> dict:
    """Reel pools and jackpot combos."""
    pools = {
        key: [ItemView.from_item(item) for item in catalog.items_for(i)]
        for i, key in enumerate(POOL_KEYS)
    }
    response = CatalogResponse(
        catalogHash=catalog_hash,
        jackpots=catalog.to_dict()["jackpots"],
        **pools,
    )
    return response.model_dump()


@app.get("/state")
async def get_state(request: Request) -> dict:
    """Current round state of the session."""
    state_data = await redis_service.get_session_state(request.state.session_id)
    return _state_view(_load_controller(state_data)).model_dump()


@app.delete("/state")
async def reset_state(request: Request) -> dict:
    """Forget the session's round state."""
    session_id = request.state.session_id
    async with redis_service.session_lock(session_id):
        await redis_service.clear_session_state(session_id)
    return _state_view(_load_controller(None)).model_dump()


@app.post("/round/start")
async def start_round(request: Request) -> dict:
    """Start all three reels. accepted=false while a round is in progress."""
    return await _run_command(
        request.state.session_id, "start", lambda c: c.start_round()
    )


@app.post("/reels/stop-next")
async def stop_next(request: Request) -> dict:
    """Stop the lowest-indexed spinning reel."""
    return await _run_command(
        request.state.session_id, "stop_next", lambda c: c.stop_next_spinning()
    )


@app.post("/reels/{index}/stop")
async def stop_reel(request: Request, index: int) -> dict:
    """Stop one reel. accepted=false if it is not spinning."""
    validate_reel_index(index)
    return await _run_command(
        request.state.session_id, "stop", lambda c: c.stop_reel(index)
    )


@app.post("/input")
async def handle_input(request: Request, body: InputRequest) -> dict:
    """
    Keyboard or button input.

    Keys are mapped against the current state (idle: start, spinning: stop);
    buttons map directly to start / stop-N.
    """
    validate_input_request(body)

    def action(controller: SpinController) -> bool:
        source = KeyboardInput(controller)
        if body.code is not None:
            return source.handle_key(body.code)
        return source.press_button(body.button.value)

    return await _run_command(request.state.session_id, "input", action)
