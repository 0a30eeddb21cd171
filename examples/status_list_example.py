#!/usr/bin/env python3
"""
Status List 2021 Example.

Demonstrates checking a credential's revocation bit in a published status list.
"""

import asyncio
import base64
import gzip

import httpx

from vc_revocation import RevocationEngine, StatusListProvider

STATUS_LIST_URL = "https://issuer.example.com/status/1"


def status_list_credential() -> dict:
    # 16 KB list with index 94567 revoked
    bits = bytearray(16 * 1024)
    bits[94567 // 8] |= 0x80 >> (94567 % 8)
    return {
        "type": ["VerifiableCredential", "StatusList2021Credential"],
        "credentialSubject": {
            "type": "StatusList2021",
            "statusPurpose": "revocation",
            "encodedList": base64.b64encode(gzip.compress(bytes(bits))).decode("ascii"),
        },
    }


async def main():
    print("=== Status List 2021 Example ===\n")

    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=status_list_credential()))
    provider = StatusListProvider(http_client=httpx.AsyncClient(transport=transport))

    engine = RevocationEngine()
    await engine.register_revocation_provider(provider)

    for index in ("94567", "23452"):
        credential = {
            "id": f"https://example.com/credentials/{index}",
            "credentialStatus": {
                "type": "StatusList2021Entry",
                "statusPurpose": "revocation",
                "statusListIndex": index,
                "statusListCredential": STATUS_LIST_URL,
            },
        }
        status = await engine.check_revocation_status(credential)
        print(f"   - Index {index}: revoked={status.is_revoked} (source: {status.source})")


if __name__ == "__main__":
    asyncio.run(main())
