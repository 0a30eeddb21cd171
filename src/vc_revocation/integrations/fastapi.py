"""FastAPI integration for vc-revocation."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.errors import ListCodecError
from ..core.models import (
    BatchRevocationResult,
    RevocationStatus,
    ValidationResult,
)
from ..engine import RevocationEngine

CREDENTIAL_ID_HEADER = "X-Credential-Id"

MEDIA_TYPES = {
    "json": "application/json",
    "csv": "text/csv",
    "yaml": "application/yaml",
}


class BatchRequest(BaseModel):
    """Body of a batch revocation check."""

    credential_ids: list[str] = Field(alias="credentialIds")

    model_config = {"populate_by_name": True}


def create_revocation_router(engine: RevocationEngine, prefix: str = "") -> APIRouter:
    """Build an APIRouter exposing an engine's query and export operations.

    Args:
        engine: Engine answering the queries
        prefix: Optional route prefix (e.g. "/revocation")

    Returns:
        APIRouter to include in an application
    """
    router = APIRouter(prefix=prefix)

    @router.get("/status/{credential_id:path}", response_model=RevocationStatus)
    async def get_status(credential_id: str) -> RevocationStatus:
        return await engine.check_revocation_status(credential_id)

    @router.post("/batch", response_model=BatchRevocationResult)
    async def batch_check(body: BatchRequest) -> BatchRevocationResult:
        return await engine.batch_revocation_check(body.credential_ids)

    @router.post("/validate", response_model=ValidationResult)
    async def validate(credential: dict[str, Any] = Body(...)) -> ValidationResult:
        return await engine.validate_credential(credential)

    @router.get("/export")
    async def export(format: str = "json") -> Response:
        try:
            content = await engine.export_revocation_list(format)
        except ListCodecError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if format == "json":
            return Response(content=content, media_type=MEDIA_TYPES["json"])
        return PlainTextResponse(content=content, media_type=MEDIA_TYPES[format])

    return router


class RevocationMiddleware(BaseHTTPMiddleware):
    """FastAPI middleware attaching the revocation status of the presented credential."""

    def __init__(
        self,
        app,
        engine: RevocationEngine,
        header_name: str = CREDENTIAL_ID_HEADER,
        optional: bool = True,
    ):
        """Initialize middleware.

        Args:
            app: FastAPI application
            engine: Engine answering revocation queries
            header_name: Header carrying the credential id
            optional: If False, reject requests whose credential is revoked
        """
        super().__init__(app)
        self.engine = engine
        self.header_name = header_name
        self.optional = optional

    async def dispatch(self, request: Request, call_next):
        """Process request."""
        credential_id = request.headers.get(self.header_name)
        status = (
            await self.engine.check_revocation_status(credential_id)
            if credential_id
            else None
        )
        request.state.revocation_status = status

        if not self.optional and status is not None and status.is_revoked:
            return PlainTextResponse("Credential has been revoked", status_code=403)

        return await call_next(request)


def require_not_revoked(engine: RevocationEngine, header_name: str = CREDENTIAL_ID_HEADER):
    """Dependency rejecting requests that present a revoked credential.

    Args:
        engine: Engine answering revocation queries
        header_name: Header carrying the credential id

    Returns:
        Dependency returning the credential's RevocationStatus

    Raises:
        HTTPException: 401 if the header is missing, 403 if revoked
    """

    async def _require_not_revoked(request: Request) -> RevocationStatus:
        credential_id: Optional[str] = request.headers.get(header_name)
        if not credential_id:
            raise HTTPException(status_code=401, detail=f"Missing {header_name} header")

        status = await engine.check_revocation_status(credential_id)
        if status.is_revoked:
            raise HTTPException(status_code=403, detail="Credential has been revoked")

        return status

    return Depends(_require_not_revoked)
