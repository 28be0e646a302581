"""
HTTP adapters for the external services, built on httpx.

Wire formats (JSON):

    Inbox       GET  /inbox?limit=N            -> {"messages": [Message, ...]}
    Classifier  POST /analyze    Message       -> ClassificationResult
    Prover      POST /proofs     {message, classification} -> {"proof": ProofArtifact | null}
    Ledger      POST /ledger/proofs  ProofArtifact -> {"signature": str | null}
    Wallet      GET  /wallet/status            -> {"connected": bool, "identity": str | null}
                POST /wallet/connect, POST /wallet/disconnect
    Reputation  GET  /reputation/{sender}      -> ReputationScore

Error responses are expected to carry an ``error`` or ``detail`` field; its
text becomes the message of the raised CollaboratorError.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .base import InboxProvider, ThreatClassifier, ProofService, WalletProvider, ReputationScorer
from ..exceptions import CollaboratorError, InboxFetchError
from ..models import (
    ClassificationResult,
    LedgerStatus,
    Message,
    ProofArtifact,
    ReputationScore,
)

logger = logging.getLogger(__name__)


class ServiceClient:
    """Thin JSON client shared by all HTTP adapters."""

    service = "service"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Service root URL
            api_key: Optional bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{self.service} request {method} {path} failed: {e}")
            raise CollaboratorError(self.service, f"{self.service} unreachable: {e}") from e

        if response.status_code == 204:
            return None

        if response.is_error:
            message = self._error_text(response)
            logger.warning(f"{self.service} returned {response.status_code} for {method} {path}: {message}")
            raise CollaboratorError(self.service, message, status_code=response.status_code)

        logger.debug(f"{self.service} {method} {path} -> {response.status_code}")
        return response.json()

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            text = data.get('error') or data.get('detail') or data.get('message')
            if text:
                return str(text)

        return f"HTTP {response.status_code}: {response.text[:200]}"


class HttpInboxProvider(ServiceClient, InboxProvider):
    """Inbox provider reached over HTTP. Requires the mailbox secret."""

    service = "inbox"

    def __init__(self, base_url: str, secret: Optional[str] = None, **kwargs):
        super().__init__(base_url, api_key=secret, **kwargs)
        self.secret = secret

    async def fetch_messages(self, limit: int) -> List[Message]:
        if not self.secret:
            raise InboxFetchError("INBOX_SECRET not configured. Please add it to your .env file.")

        data = await self._request("GET", "/inbox", params={"limit": limit})
        messages = [Message.from_dict(item) for item in (data or {}).get('messages', [])]
        logger.info(f"Fetched {len(messages)} messages from inbox")
        return messages


class HttpThreatClassifier(ServiceClient, ThreatClassifier):
    service = "classifier"

    async def classify(self, message: Message) -> ClassificationResult:
        data = await self._request("POST", "/analyze", json=message.to_dict())
        return ClassificationResult.from_dict(data)


class HttpProofService(ServiceClient, ProofService):
    """Prover and ledger submission endpoints (same service root)."""

    service = "ledger"

    async def generate_proof(
        self,
        message: Message,
        classification: ClassificationResult
    ) -> Optional[ProofArtifact]:
        payload = {
            'message': message.to_dict(),
            'classification': classification.to_dict()
        }
        data = await self._request("POST", "/proofs", json=payload)
        proof = (data or {}).get('proof')
        if not proof:
            return None
        return ProofArtifact.from_dict(proof)

    async def submit(self, proof: ProofArtifact) -> Optional[str]:
        data = await self._request("POST", "/ledger/proofs", json=proof.to_dict())
        return (data or {}).get('signature')


class HttpWalletProvider(ServiceClient, WalletProvider):
    service = "wallet"

    async def get_status(self) -> LedgerStatus:
        data: Dict[str, Any] = await self._request("GET", "/wallet/status") or {}
        return LedgerStatus(
            connected=bool(data.get('connected', False)),
            identity=data.get('identity')
        )

    async def request_connection(self) -> None:
        await self._request("POST", "/wallet/connect")

    async def disconnect(self) -> None:
        await self._request("POST", "/wallet/disconnect")


class HttpReputationScorer(ServiceClient, ReputationScorer):
    service = "reputation"

    async def lookup(self, sender: str) -> ReputationScore:
        data = await self._request("GET", f"/reputation/{quote(sender, safe='')}") or {}
        data.setdefault('sender', sender)
        return ReputationScore.from_dict(data)
