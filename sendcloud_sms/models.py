"""Result types and the gateway response wire format."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from .errors import REJECTION_CODE, ErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one send call.

    Both gateway answers and local rejections use this shape, so callers
    branch on ``success`` / ``code`` only.
    """

    success: bool
    code: int | None = None
    message: str | None = None
    info: dict[str, Any] | None = None

    @classmethod
    def rejected(cls, reason: ErrorCode) -> ActionResult:
        return cls(False, REJECTION_CODE, reason.message)


class SendCloudResponse(BaseModel):
    """``{"result": bool, "statusCode": int?, "message": str?, "info": {}?}``"""

    model_config = ConfigDict(populate_by_name=True)

    result: StrictBool = False
    status_code: int | None = Field(default=None, alias="statusCode")
    message: str | None = None
    info: dict[str, Any] | None = None

    def to_action_result(self) -> ActionResult:
        return ActionResult(self.result, self.status_code, self.message, self.info)


def parse_response(body: bytes | str | None) -> ActionResult:
    """Map a raw response body onto ``ActionResult``.

    An empty body, or one that is not a JSON object of the expected shape,
    is a failed send with no code or message.  An object without ``result``
    is a failed send that keeps its ``statusCode`` and ``message``.  Never
    raises.
    """
    if not body:
        logger.warning("Empty response body from SMS gateway")
        return ActionResult(False)
    try:
        response = SendCloudResponse.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("Unparseable response from SMS gateway: %d error(s)", exc.error_count())
        return ActionResult(False)
    return response.to_action_result()
