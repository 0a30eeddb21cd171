"""Blockchain-backed revocation provider for a decentralized revocation registry."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from web3 import Web3
from web3.contract import Contract

from ..core.credential import credential_id as credential_id_of
from ..core.errors import ProviderError
from ..core.models import RevocationMetadata
from .base import RevocationProvider


# Revocation Registry ABI - minimal interface for our needs
REVOCATION_REGISTRY_ABI = [
    {
        "inputs": [{"name": "credentialId", "type": "string"}],
        "name": "isRevoked",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "credentialId", "type": "string"}],
        "name": "getRevocation",
        "outputs": [
            {"name": "issuer", "type": "string"},
            {"name": "revokedAt", "type": "uint256"},
            {"name": "reason", "type": "string"},
            {"name": "isRevoked", "type": "bool"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"name": "credentialId", "type": "string"},
            {"name": "reason", "type": "string"},
        ],
        "name": "revoke",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class BlockchainRevocationProvider(RevocationProvider):
    """Revocation provider backed by a smart contract registry.

    Issuers publish revocations on-chain; this provider reads them through
    web3. Contract calls are blocking and run in a worker thread.
    """

    def __init__(
        self,
        web3_provider: Web3,
        registry_address: str,
        name: str = "blockchain",
        description: str = "On-chain revocation registry",
        abi: Optional[list] = None,
    ):
        """Initialize the provider.

        Args:
            web3_provider: Web3 instance connected to a blockchain
            registry_address: Address of the revocation registry contract
            name: Provider name used in the chain
            description: Human-readable description
            abi: Contract ABI (uses default REVOCATION_REGISTRY_ABI if not provided)
        """
        self.web3 = web3_provider
        self.registry_address = Web3.to_checksum_address(registry_address)
        self.name = name
        self.description = description
        self.contract: Contract = self.web3.eth.contract(
            address=self.registry_address, abi=abi or REVOCATION_REGISTRY_ABI
        )

    def _credential_id(self, credential_or_id: Any) -> str:
        cid = credential_id_of(credential_or_id)
        if cid is None:
            raise ProviderError("On-chain revocation lookup requires a credential id")
        return cid

    async def is_available(self) -> bool:
        return bool(await asyncio.to_thread(self.web3.is_connected))

    async def check_revocation(self, credential_or_id: Any) -> bool:
        cid = self._credential_id(credential_or_id)
        call = self.contract.functions.isRevoked(cid).call
        return bool(await asyncio.to_thread(call))

    async def get_metadata(self, credential_or_id: Any) -> Optional[RevocationMetadata]:
        """Read revocation details from the registry.

        Returns:
            RevocationMetadata if the credential is revoked on-chain, None otherwise
        """
        cid = self._credential_id(credential_or_id)
        call = self.contract.functions.getRevocation(cid).call

        # Unpack result (issuer, revokedAt, reason, isRevoked)
        issuer, revoked_at, reason, is_revoked = await asyncio.to_thread(call)
        if not is_revoked:
            return None

        return RevocationMetadata(
            issuer_did=issuer,
            revoked_date=datetime.fromtimestamp(revoked_at, tz=timezone.utc),
            reason=reason or None,
            source=self.name,
        )

    def publish_revocation(
        self,
        credential_id: str,
        reason: str,
        sender_address: str,
        private_key: Optional[str] = None,
    ) -> str:
        """Revoke a credential on the blockchain.

        Args:
            credential_id: Credential identifier to revoke
            reason: Revocation reason
            sender_address: Address sending the transaction
            private_key: Private key for signing (if not using provider's accounts)

        Returns:
            Transaction hash

        Raises:
            ProviderError: If the transaction fails
        """
        try:
            sender = Web3.to_checksum_address(sender_address)
            tx = self.contract.functions.revoke(credential_id, reason).build_transaction(
                {
                    "from": sender,
                    "gas": 150000,
                    "gasPrice": self.web3.eth.gas_price,
                    "nonce": self.web3.eth.get_transaction_count(sender),
                }
            )

            # Sign and send
            if private_key:
                signed_tx = self.web3.eth.account.sign_transaction(tx, private_key)
                tx_hash = self.web3.eth.send_raw_transaction(signed_tx.raw_transaction)
            else:
                tx_hash = self.web3.eth.send_transaction(tx)

            return tx_hash.hex()

        except Exception as e:
            raise ProviderError(f"Failed to publish revocation: {e}") from e
