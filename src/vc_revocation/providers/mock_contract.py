"""Mock smart contract for testing BlockchainRevocationProvider."""

import time
from typing import Any, Optional


class MockRevocationRegistryContract:
    """Mock implementation of the revocation registry contract."""

    def __init__(self):
        """Initialize mock contract with empty registry."""
        self._revocations: dict[str, dict[str, Any]] = {}

    def revoke(
        self,
        credential_id: str,
        issuer: str = "did:example:issuer",
        reason: str = "",
        revoked_at: Optional[int] = None,
    ) -> None:
        """Record a revocation in the mock registry."""
        self._revocations[credential_id] = {
            "issuer": issuer,
            "revokedAt": revoked_at if revoked_at is not None else int(time.time()),
            "reason": reason,
        }

    def unrevoke(self, credential_id: str) -> None:
        self._revocations.pop(credential_id, None)

    def is_revoked(self, credential_id: str) -> bool:
        return credential_id in self._revocations

    def get_revocation(self, credential_id: str) -> tuple[str, int, str, bool]:
        """Get revocation information.

        Returns tuple: (issuer, revokedAt, reason, isRevoked)
        """
        if credential_id not in self._revocations:
            return ("", 0, "", False)

        entry = self._revocations[credential_id]
        return (entry["issuer"], entry["revokedAt"], entry["reason"], True)


class MockWeb3:
    """Mock Web3 instance for testing."""

    def __init__(self, mock_contract: MockRevocationRegistryContract, connected: bool = True):
        """Initialize mock Web3 with a mock contract."""
        self._mock_contract = mock_contract
        self.connected = connected
        self.eth = MockEth(mock_contract)

    def is_connected(self) -> bool:
        return self.connected


class MockEth:
    """Mock eth module."""

    def __init__(self, mock_contract: MockRevocationRegistryContract):
        """Initialize mock eth."""
        self._mock_contract = mock_contract
        self.gas_price = 1000000000  # 1 gwei
        self.sent: list[dict] = []

    def contract(self, address: str, abi: list) -> "MockContract":
        """Return mock contract."""
        return MockContract(self._mock_contract)

    def get_transaction_count(self, address: str) -> int:
        return len(self.sent)

    def send_transaction(self, tx: dict) -> bytes:
        self.sent.append(tx)
        return bytes.fromhex("1234")


class MockContract:
    """Mock contract instance."""

    def __init__(self, mock_registry: MockRevocationRegistryContract):
        """Initialize mock contract."""
        self._registry = mock_registry
        self.functions = MockContractFunctions(mock_registry)


class MockContractFunctions:
    """Mock contract functions."""

    def __init__(self, mock_registry: MockRevocationRegistryContract):
        self._registry = mock_registry

    def isRevoked(self, credential_id: str) -> "MockCall":
        return MockCall(lambda: self._registry.is_revoked(credential_id))

    def getRevocation(self, credential_id: str) -> "MockCall":
        return MockCall(lambda: self._registry.get_revocation(credential_id))

    def revoke(self, credential_id: str, reason: str) -> "MockTransaction":
        return MockTransaction(
            lambda sender: self._registry.revoke(credential_id, issuer=sender, reason=reason)
        )


class MockCall:
    """Mock contract call."""

    def __init__(self, func):
        self._func = func

    def call(self):
        """Execute the call."""
        return self._func()


class MockTransaction:
    """Mock transaction builder."""

    def __init__(self, func):
        self._func = func

    def build_transaction(self, params: dict) -> dict:
        """Build transaction (mock)."""
        # Execute immediately for testing
        self._func(params.get("from", ""))
        return dict(params)
