#!/usr/bin/env python3
"""FastAPI Integration Example - Revocation status service and guarded endpoints."""

from fastapi import FastAPI, Request

from vc_revocation import RevocationEngine, RevocationStatus
from vc_revocation.integrations.fastapi import (
    RevocationMiddleware,
    create_revocation_router,
    require_not_revoked,
)

engine = RevocationEngine()

# Create FastAPI app
app = FastAPI(title="Credential Status API")

# Status, batch, validate and export endpoints
app.include_router(create_revocation_router(engine, prefix="/revocation"))

# Attach the presented credential's status to every request
app.add_middleware(RevocationMiddleware, engine=engine, optional=True)


@app.get("/profile")
async def profile(request: Request):
    """Public endpoint - reports the status if a credential was presented."""
    status = request.state.revocation_status
    return {"credential_revoked": None if status is None else status.is_revoked}


@app.post("/transfer")
async def transfer(amount: float, status: RevocationStatus = require_not_revoked(engine)):
    """Protected endpoint - requires a credential that is not revoked."""
    return {"status": "accepted", "amount": amount, "checked_at": status.last_checked}


def main():
    print("FastAPI app configured with revocation checking!\n")
    print("Endpoints:")
    print("  GET  /revocation/status/{id} - Single credential status")
    print("  POST /revocation/batch       - Batch status check")
    print("  POST /revocation/validate    - Validate a credential")
    print("  GET  /revocation/export      - Export the revocation list")
    print("  GET  /profile                - Public (status attached if presented)")
    print("  POST /transfer               - Requires a non-revoked X-Credential-Id\n")
    print("To run:")
    print("  uvicorn fastapi_example:app --reload\n")

if __name__ == "__main__":
    # For demo purposes - in production use uvicorn
    main()
