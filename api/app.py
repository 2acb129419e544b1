"""HTTP API entrypoint for driving a game from a web UI or script."""

from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from agents.commands import Command
from engine.core.types import Side
from infra.logger import configure_from_settings, get_logger
from infra.settings import get_settings
from runtime.logfire_config import configure_logfire
from runtime.runner import GameRunner
from runtime.scenario import Scenario

# Configure logging and observability before app/agent imports are used.
configure_from_settings(get_settings())
configure_logfire()

log = get_logger(__name__)

app = FastAPI(title="Alpha Strike Engine")
runner: Optional[GameRunner] = None


# Allow a browser-based control panel (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartRequest(BaseModel):
    scenario: Dict[str, Any]


class StepRequest(BaseModel):
    injections: Optional[Dict[str, Dict[str, Any]]] = None


class CommandRequest(BaseModel):
    side: Literal["player", "ai"]
    commands: List[Command] = Field(default_factory=list)


def _active_runner() -> GameRunner:
    if runner is None:
        raise HTTPException(400, "No active game")
    return runner


@app.post("/start")
def start(request: StartRequest):
    global runner
    try:
        scenario = Scenario.from_dict(request.scenario)
        runner = GameRunner(scenario)
    except (ValidationError, ValueError) as exc:
        raise HTTPException(422, str(exc)) from exc
    log.info("Started game with %d units", len(runner.state.battlefield.all_units()))
    return {"success": True, "state": runner.state.to_dict()}


@app.post("/step")
def step(request: StepRequest):
    active = _active_runner()
    try:
        return active.step(request.injections).to_dict()
    except RuntimeError as exc:
        raise HTTPException(400, str(exc)) from exc


@app.post("/command")
def command(request: CommandRequest):
    active = _active_runner()
    try:
        outcomes = active.submit(Side(request.side), request.commands)
    except RuntimeError as exc:
        raise HTTPException(400, str(exc)) from exc
    return {"outcomes": outcomes, "state": active.state.to_dict()}


@app.get("/state")
def state():
    return _active_runner().state.to_dict()


@app.get("/log")
def battle_log(since: int = 0):
    active = _active_runner()
    return {"entries": [e.to_dict() for e in active.state.log.since(since)], "size": len(active.state.log)}


@app.post("/stop")
def stop():
    global runner
    active = _active_runner()
    active.abort()
    path = active.save_log()
    runner = None
    return {"success": True, "message": "Game aborted", "log_file": str(path)}


@app.get("/status")
def status():
    if runner is None:
        return {"active": False}
    return {
        "active": True,
        "round": runner.turn,
        "phase": str(runner.state.phase),
        "step": runner.step_count,
        "done": runner.done,
        "outcome": runner.outcome.to_dict(),
    }
