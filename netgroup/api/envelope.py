"""Success Envelope — wraps every successful payload as {success, data, message?, meta}."""

from typing import Any

from pydantic import BaseModel

from netgroup.core.domain_types import utc_now


def success_response(data: Any, message: str | None = None) -> dict:
    """Pydantic payloads are dumped by alias (camelCase) in JSON mode."""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, mode="json")
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    body["meta"] = {"timestamp": utc_now().isoformat()}
    return body
