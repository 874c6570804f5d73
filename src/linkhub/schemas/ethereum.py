"""Ethereum JSON-RPC 2.0 envelopes and transaction shape, hex-encoded quantities kept as strings."""

from itertools import count
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ResultT = TypeVar("ResultT")

JSONRPC_VERSION = "2.0"

_request_ids = count(1)


class EthTransaction(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hash: str
    nonce: str | None = None
    block_hash: str | None = None
    block_number: str | None = None
    transaction_index: str | None = None
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None  # None for contract creation
    value: str | None = None
    gas_price: str | None = None
    gas: str | None = None
    max_fee_per_gas: str | None = None
    max_priority_fee_per_gas: str | None = None
    input: str | None = None
    r: str | None = None
    s: str | None = None
    v: str | None = None
    y_parity: str | None = None
    chain_id: str | None = None
    access_list: list[Any] = Field(default_factory=list)
    type: str | None = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Any = None


class JsonRpcRequest(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: list[Any] = Field(default_factory=list)
    id: int = Field(default_factory=lambda: next(_request_ids))


class JsonRpcResponse(BaseModel, Generic[ResultT]):
    jsonrpc: str
    id: int | str | None = None
    result: ResultT | None = None
    error: JsonRpcError | None = None


def get_transaction_by_hash(tx_hash: str, request_id: int | None = None) -> JsonRpcRequest:
    """Build an ``eth_getTransactionByHash`` request"""
    fields: dict[str, Any] = {"method": "eth_getTransactionByHash", "params": [tx_hash]}
    if request_id is not None:
        fields["id"] = request_id
    return JsonRpcRequest(**fields)
