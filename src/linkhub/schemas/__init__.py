"""Response schemas for the blockchain APIs the clients talk to."""

from .ethereum import (
    EthTransaction,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    get_transaction_by_hash,
)
from .ton import (
    AccountState,
    AddressBookEntry,
    ComputePhase,
    StoragePhase,
    Transaction,
    TransactionDescription,
    TransactionsResponse,
)

__all__ = [
    "AccountState",
    "AddressBookEntry",
    "ComputePhase",
    "StoragePhase",
    "Transaction",
    "TransactionDescription",
    "TransactionsResponse",
    "EthTransaction",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "get_transaction_by_hash",
]
