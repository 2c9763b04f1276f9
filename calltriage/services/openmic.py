"""OpenMic voice platform client"""

import time
from typing import Any, Dict, List, Optional
import httpx
import structlog
from pydantic import BaseModel

from calltriage.errors import OpenMicError

logger = structlog.get_logger()

NOT_CONFIGURED = (
    "OpenMic API key not configured. Please set OPENMIC_API_KEY environment variable."
)

# In-call function the bot may invoke to look a patient up
GET_PATIENT_INFO_FUNCTION = {
    "name": "getPatientInfo",
    "description": "Retrieve patient information by ID for mental health triage",
    "parameters": {
        "type": "object",
        "properties": {
            "patientId": {
                "type": "string",
                "description": "The patient's unique identifier",
            },
        },
        "required": ["patientId"],
    },
}


class PlatformBot(BaseModel):
    """Bot as known to OpenMic"""
    id: str
    name: str
    personality: List[str] = []
    greeting: str = ""
    functions: List[Dict[str, Any]] = []


def _generated_bot_id() -> str:
    return f"bot_{int(time.time() * 1000)}"


def _split_personality(value: Any) -> Optional[List[str]]:
    if isinstance(value, list):
        return [str(trait).strip() for trait in value if str(trait).strip()]
    if isinstance(value, str) and value.strip():
        return [trait.strip() for trait in value.split(",") if trait.strip()]
    return None


def map_platform_bot(payload: Dict[str, Any], fallback: Optional[Dict[str, Any]] = None) -> PlatformBot:
    """
    Map an OpenMic bot payload onto PlatformBot.

    OpenMic responses vary in shape (id vs bot_id vs uid, system_prompt vs
    greeting); every field falls back to the locally known value, then to a
    fixed default.
    """
    fallback = fallback or {}

    personality = _split_personality(payload.get("personality"))
    if personality is None:
        personality = list(fallback.get("personality") or [])

    return PlatformBot(
        id=str(
            payload.get("id")
            or payload.get("bot_id")
            or payload.get("uid")
            or fallback.get("id")
            or _generated_bot_id()
        ),
        name=payload.get("name") or fallback.get("name") or "Unknown Bot",
        personality=personality,
        greeting=payload.get("system_prompt") or payload.get("greeting") or fallback.get("greeting") or "",
        functions=payload.get("functions") or fallback.get("functions") or [],
    )


class OpenMicClient:
    """
    Thin HTTP client for bot management on OpenMic.

    Every failure is raised as OpenMicError with a readable message; callers
    decide whether to surface or swallow it.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        demo_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.demo_mode = demo_mode
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "demo_key"

    def _check_configuration(self) -> None:
        if not self.is_configured:
            logger.warning("OpenMic integration not configured")
            raise OpenMicError(f"OpenMic integration error: {NOT_CONFIGURED}")

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        self._check_configuration()

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
                headers={"Authorization": f"Bearer {self.api_key}"},
            ) as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Failed to {action} OpenMic bot", error=str(e))
            raise OpenMicError(f"Failed to {action} OpenMic bot: {str(e) or type(e).__name__}") from e

        if response.is_error:
            logger.error(
                "OpenMic API error response",
                action=action,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise OpenMicError(
                f"Failed to {action} OpenMic bot: OpenMic API error "
                f"({response.status_code}): {response.reason_phrase}"
            )

        return response

    @staticmethod
    def _json(response: httpx.Response, action: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise OpenMicError(f"Failed to {action} OpenMic bot: invalid JSON response") from e

    async def create_bot(self, name: str, personality: List[str], greeting: str) -> PlatformBot:
        """Register a bot; returns it with the OpenMic-assigned id"""
        local = {"name": name, "personality": personality, "greeting": greeting}

        if not self.is_configured and self.demo_mode:
            bot = PlatformBot(id=_generated_bot_id(), **local)
            logger.warning("OpenMic not configured, using demo bot id", external_bot_id=bot.id)
            return bot

        payload = {
            "name": name,
            "description": f"Mental health triage bot: {name}",
            "personality": ", ".join(personality),
            "system_prompt": greeting,
            "functions": [GET_PATIENT_INFO_FUNCTION],
        }

        logger.info("Creating OpenMic bot", name=name)
        response = await self._request("POST", "/bots", "create", json=payload)
        data = self._json(response, "create")
        if not isinstance(data, dict):
            raise OpenMicError("Failed to create OpenMic bot: unexpected response shape")

        bot = map_platform_bot(data, local)
        logger.info("OpenMic bot created", external_bot_id=bot.id)
        return bot

    async def update_bot(
        self,
        bot_id: str,
        name: Optional[str] = None,
        personality: Optional[List[str]] = None,
        greeting: Optional[str] = None,
    ) -> PlatformBot:
        """Patch only the supplied fields"""
        payload: Dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if personality is not None:
            payload["personality"] = ", ".join(personality)
        if greeting is not None:
            payload["system_prompt"] = greeting

        response = await self._request("PATCH", f"/bots/{bot_id}", "update", json=payload)
        data = self._json(response, "update") if response.content else {}

        fallback = {"id": bot_id, "name": name, "personality": personality, "greeting": greeting}
        bot = map_platform_bot(data if isinstance(data, dict) else {}, fallback)
        logger.info("OpenMic bot updated", external_bot_id=bot.id)
        return bot

    async def delete_bot(self, bot_id: str) -> None:
        await self._request("DELETE", f"/bots/{bot_id}", "delete")
        logger.info("OpenMic bot deleted", external_bot_id=bot_id)

    async def list_bots(self) -> List[PlatformBot]:
        response = await self._request("GET", "/bots", "fetch")
        data = self._json(response, "fetch")
        if not isinstance(data, list):
            raise OpenMicError("Failed to fetch OpenMic bots: unexpected response shape")
        return [map_platform_bot(item) for item in data if isinstance(item, dict)]
