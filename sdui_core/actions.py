from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Mapping, Union

LOGGER = logging.getLogger(__name__)

PUSH_PAGE = "@pushPage"
POP_PAGE = "@popPage"
SUBMIT_FORM = "@submitForm"
BIOMETRIC_AUTH = "@biometricAuth"
TOAST = "@toast"
REGISTER = "@register"

ACTION_TYPES: tuple[str, ...] = (PUSH_PAGE, POP_PAGE, SUBMIT_FORM, TOAST, REGISTER)

# Tokens for these types carry the whole action object so executors can read params.
PARAM_PRESERVING_TYPES = frozenset({SUBMIT_FORM, BIOMETRIC_AUTH, TOAST})


class ActionParseError(ValueError):
    pass


@dataclass(frozen=True)
class NamedAction:
    """Zero-argument action stored as a bare string, e.g. `@register`."""

    name: str


@dataclass(frozen=True)
class StructuredAction:
    """Parameterized action stored as `{type, params?}`.

    `params` is None when the stored object had no mapping under `params`. Any
    other keys (such as a top-level `pageId`) are kept in `extras`. Actions read
    from a document keep the stored object in `source`, which is what gets
    written back and serialized into tokens.
    """

    type: str
    params: dict[str, Any] | None = None
    extras: dict[str, Any] = field(default_factory=dict)
    source: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> "StructuredAction":
        params = raw.get("params")
        extras = {str(k): v for k, v in raw.items() if k not in ("type", "params")}
        action_type = raw.get("type")
        return StructuredAction(
            type="" if action_type is None else str(action_type),
            params=dict(params) if isinstance(params, Mapping) else None,
            extras=json.loads(json.dumps(extras)),
            source=json.loads(json.dumps({str(k): v for k, v in raw.items()})),
        )

    def to_dict(self) -> dict[str, Any]:
        if self.source is not None:
            return json.loads(json.dumps(self.source))
        out: dict[str, Any] = {"type": self.type}
        if self.params is not None:
            out["params"] = json.loads(json.dumps(self.params))
        for key, value in self.extras.items():
            out[key] = json.loads(json.dumps(value))
        return out


@dataclass(frozen=True)
class SerializedAction:
    """A structured action that was stored as a JSON string."""

    raw: str
    decoded: StructuredAction


Action = Union[NamedAction, StructuredAction, SerializedAction]


def parse_action(raw: object) -> Action | None:
    """Build the action sum type from a component's stored `action` field."""

    if raw is None:
        return None
    if isinstance(raw, (NamedAction, StructuredAction, SerializedAction)):
        return raw
    if isinstance(raw, Mapping):
        return StructuredAction.from_mapping(raw)
    if isinstance(raw, str):
        stripped = raw.strip()
        if stripped.startswith("{"):
            try:
                decoded = json.loads(stripped)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, dict) and isinstance(decoded.get("type"), str):
                return SerializedAction(raw=raw, decoded=StructuredAction.from_mapping(decoded))
        return NamedAction(name=raw)
    LOGGER.warning("coercing non-string action value %r to a named action", raw)
    return NamedAction(name=str(raw))


def action_to_raw(action: Action | None) -> object:
    """Inverse of `parse_action`: the value written back into the document."""

    if action is None:
        return None
    if isinstance(action, NamedAction):
        return action.name
    if isinstance(action, SerializedAction):
        return action.raw
    return action.to_dict()


def resolve_action(action: Action | Mapping[str, Any] | str | None) -> str | None:
    """Normalize an action into the canonical token handed to executors.

    Returns None when there is nothing to dispatch (no action, an empty string,
    or an object without a type); callers treat that as an inert component.
    """

    parsed = parse_action(action)
    if parsed is None:
        return None
    if isinstance(parsed, NamedAction):
        return parsed.name or None
    structured = parsed.decoded if isinstance(parsed, SerializedAction) else parsed
    return _resolve_structured(structured)


def _resolve_structured(action: StructuredAction) -> str | None:
    if not action.type:
        return None
    if action.type == PUSH_PAGE:
        page_id = _push_target(action)
        if page_id is None:
            LOGGER.info("@pushPage action has no target page")
            return PUSH_PAGE
        return f"{PUSH_PAGE}:{page_id}"
    if action.type == POP_PAGE:
        return POP_PAGE
    if action.type in PARAM_PRESERVING_TYPES:
        return serialize_action(action)
    if action.params:
        LOGGER.debug("dropping params of action type %s", action.type)
    return action.type


def _push_target(action: StructuredAction) -> str | None:
    params = action.params or {}
    for candidate in (params.get("pageId"), params.get("page_id"), action.extras.get("pageId")):
        if candidate:
            return str(candidate)
    return None


def serialize_action(action: StructuredAction) -> str:
    return json.dumps(action.to_dict(), separators=(",", ":"), ensure_ascii=False)


def decode_action_token(token: str) -> tuple[str, dict[str, Any]]:
    """Split a token into `(action type, params)`.

    Raises ActionParseError when a JSON-shaped token cannot be parsed back into
    an action object.
    """

    if token.startswith("{"):
        try:
            decoded = json.loads(token)
        except json.JSONDecodeError as exc:
            raise ActionParseError(f"action token is not valid JSON: {exc.msg}") from exc
        if not isinstance(decoded, dict) or not isinstance(decoded.get("type"), str):
            raise ActionParseError("action token must be a JSON object with a string `type`")
        params = decoded.get("params")
        return decoded["type"], dict(params) if isinstance(params, dict) else {}
    if token.startswith(f"{PUSH_PAGE}:"):
        _, page_id = token.split(":", 1)
        return PUSH_PAGE, {"pageId": page_id}
    return token, {}
