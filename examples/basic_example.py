#!/usr/bin/env python3
"""
Basic example demonstrating the vc-revocation workflow:
1. Issuer records revoked credentials in the local registry
2. Verifier checks single credentials and batches
3. The revocation list is exported and imported elsewhere
"""

import asyncio

from vc_revocation import RevocationEngine, RevocationMetadata


async def main():
    print("=== vc-revocation - Basic Example ===\n")

    # ============================================================================
    # STEP 1: Issuer revokes a credential
    # ============================================================================
    print("1. Issuer revoking a credential...")
    issuer = RevocationEngine()
    await issuer.add_revoked_credential(
        "urn:uuid:employee-badge-42",
        RevocationMetadata(
            issuer_did="did:example:acme",
            revoked_date="2024-01-15T10:00:00Z",
            reason="Employee left the company",
            source="hr-system",
        ),
    )
    print("   ✓ Revoked: urn:uuid:employee-badge-42\n")

    # ============================================================================
    # STEP 2: Check credentials
    # ============================================================================
    print("2. Checking credentials...")
    credential = {"id": "urn:uuid:employee-badge-42", "type": ["VerifiableCredential"]}

    status = await issuer.check_revocation_status(credential)
    print(f"   - Revoked: {status.is_revoked}")
    print(f"   - Reason: {status.reason}")

    result = await issuer.validate_credential(credential)
    print(f"   - Valid: {result.is_valid}")
    print(f"   - Warnings: {result.warnings}\n")

    # ============================================================================
    # STEP 3: Batch check
    # ============================================================================
    print("3. Batch checking...")
    batch = await issuer.batch_revocation_check(
        ["urn:uuid:employee-badge-42", "urn:uuid:employee-badge-43"]
    )
    print(f"   ✓ Checked {batch.total_checked}, revoked {batch.revoked_count}\n")

    # ============================================================================
    # STEP 4: Share the list with a verifier
    # ============================================================================
    print("4. Exporting the revocation list...")
    exported = await issuer.export_revocation_list("csv")
    print(exported)

    verifier = RevocationEngine()
    imported = await verifier.import_revocation_list(await issuer.export_revocation_list())
    print(f"\n   ✓ Verifier imported {imported} revocation(s)")
    print(f"   ✓ Verifier sees revoked: {await verifier.is_revoked('urn:uuid:employee-badge-42')}")


if __name__ == "__main__":
    asyncio.run(main())
