#!/usr/bin/env python3
"""
Online Status Responder Example.

Demonstrates real-time revocation checking against an issuer's responder.
"""

import asyncio

import httpx

from vc_revocation import RevocationEngine
from vc_revocation.providers import MockOCSPResponder, OCSPRevocationProvider


async def main():
    print("=== Online Status Responder Example ===\n")

    # ========================================================================
    # STEP 1: Issuer runs a responder
    # ========================================================================
    print("1. Issuer setting up a status responder...")
    responder = MockOCSPResponder(issuer_did="did:example:bank")
    responder_url = "http://status.bank.example.com"
    client = httpx.AsyncClient(transport=httpx.MockTransport(responder.handle))
    print(f"   ✓ Responder running at: {responder_url}\n")

    # ========================================================================
    # STEP 2: Verifier registers the responder
    # ========================================================================
    print("2. Verifier registering the responder...")
    engine = RevocationEngine()
    await engine.register_revocation_provider(
        OCSPRevocationProvider(responder_url, http_client=client, cache_ttl=0)
    )
    print("   ✓ Provider registered\n")

    # ========================================================================
    # STEP 3: Check before and after revocation
    # ========================================================================
    print("3. Checking credential before revocation...")
    status = await engine.check_revocation_status("urn:uuid:card-7")
    print(f"   - Revoked: {status.is_revoked}\n")

    print("4. Issuer revokes the credential...")
    responder.revoke_credential("urn:uuid:card-7", reason="key_compromise")
    engine.clear_cache()

    status = await engine.check_revocation_status("urn:uuid:card-7")
    print(f"   - Revoked: {status.is_revoked}")
    print(f"   - Reason: {status.reason}")
    print(f"   - Source: {status.source}")


if __name__ == "__main__":
    asyncio.run(main())
