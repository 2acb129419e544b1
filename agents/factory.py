from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from infra.logger import get_logger

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec

log = get_logger(__name__)


@dataclass
class PreparedAgent:
    """
    An agent ready to play, plus the extra keyword arguments the runner
    passes to every ``get_commands`` call.
    """
    agent: BaseAgent
    act_params: Dict[str, Any]


def create_agent_from_spec(spec: Union[AgentSpec, Mapping[str, Any]]) -> PreparedAgent:
    """
    Build the agent a spec (or its dict form) describes.

    ``side`` and ``name`` from the spec fill in constructor arguments the
    spec's ``init_params`` leave unset.

    Raises:
        ValueError: Unknown agent type, or init params the class rejects
    """
    if not isinstance(spec, AgentSpec):
        spec = AgentSpec.from_dict(dict(spec))

    cls = resolve_agent_class(spec.type)
    init_kwargs = {"side": spec.side, **spec.init_params}
    if spec.name is not None:
        init_kwargs.setdefault("name", spec.name)

    try:
        agent = cls(**init_kwargs)
    except TypeError as exc:
        raise ValueError(f"Cannot build '{spec.type}' agent for {spec.side}: {exc}") from exc

    log.debug("Built %r from spec type '%s'", agent, spec.type)
    return PreparedAgent(agent, dict(spec.act_params))
