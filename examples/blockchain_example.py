#!/usr/bin/env python3
"""
Blockchain Revocation Registry Example.

Demonstrates publishing and checking revocations on a smart contract registry.
Uses an in-memory mock in place of a real chain.
"""

import asyncio

from vc_revocation import RevocationEngine
from vc_revocation.providers import BlockchainRevocationProvider
from vc_revocation.providers.mock_contract import MockRevocationRegistryContract, MockWeb3

REGISTRY_ADDRESS = "0x1234567890123456789012345678901234567890"
ISSUER_ADDRESS = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"


async def main():
    print("=== Blockchain Revocation Registry Example ===\n")

    mock_web3 = MockWeb3(MockRevocationRegistryContract())
    provider = BlockchainRevocationProvider(mock_web3, REGISTRY_ADDRESS)

    print("1. Issuer publishing a revocation on-chain...")
    tx_hash = provider.publish_revocation(
        "urn:uuid:diploma-2019", reason="Issued in error", sender_address=ISSUER_ADDRESS
    )
    print(f"   ✓ Transaction: {tx_hash}\n")

    print("2. Verifier checking the registry...")
    engine = RevocationEngine()
    await engine.register_revocation_provider(provider)

    status = await engine.check_revocation_status("urn:uuid:diploma-2019")
    print(f"   - Revoked: {status.is_revoked}")
    print(f"   - Reason: {status.reason}")
    print(f"   - Issuer: {status.metadata.issuer_did if status.metadata else None}")


if __name__ == "__main__":
    asyncio.run(main())
