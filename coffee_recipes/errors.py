"""Error taxonomy shared by the gateway, transports and handlers."""
from __future__ import annotations


class RecipeServiceError(RuntimeError):
    """Base class for failures while talking to the model."""


class UpstreamError(RecipeServiceError):
    """The remote model call itself failed (network, auth, quota)."""


class MalformedUpstreamResponse(RecipeServiceError):
    """The model answered without calling the required function, or called another one."""


class ModelDeclinedTask(RecipeServiceError):
    """The model set the failure flag in its structured answer."""


class NoValidResult(RecipeServiceError):
    pass


class IncompleteResult(RecipeServiceError):
    pass


class InvalidRequest(ValueError):
    """Inbound request body is malformed or incomplete."""


__all__ = [
    "IncompleteResult",
    "InvalidRequest",
    "MalformedUpstreamResponse",
    "ModelDeclinedTask",
    "NoValidResult",
    "RecipeServiceError",
    "UpstreamError",
]
