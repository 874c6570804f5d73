"""TON Center v3 response shapes used as decode targets."""

from pydantic import BaseModel, Field


class StoragePhase(BaseModel):
    storage_fees_collected: str | None = None
    status_change: str | None = None


class ComputePhase(BaseModel):
    success: bool = False
    gas_fees: str | None = None
    gas_used: str | None = None
    gas_limit: str | None = None
    exit_code: int = 0
    vm_steps: int = 0


class TransactionDescription(BaseModel):
    type: str
    aborted: bool = False
    destroyed: bool = False
    is_tock: bool = False
    storage_ph: StoragePhase | None = None
    compute_ph: ComputePhase | None = None


class AccountState(BaseModel):
    hash: str | None = None
    balance: str | None = None
    account_status: str | None = None
    data_hash: str | None = None
    code_hash: str | None = None


class Transaction(BaseModel):
    """Transaction as listed by ``/transactionsByMasterchainBlock``"""

    account: str
    hash: str
    lt: str
    now: int
    mc_block_seqno: int
    trace_id: str | None = None
    description: TransactionDescription
    account_state_before: AccountState | None = None
    account_state_after: AccountState | None = None


class AddressBookEntry(BaseModel):
    user_friendly: str
    domain: str | None = None


class TransactionsResponse(BaseModel):
    transactions: list[Transaction] = Field(default_factory=list)
    address_book: dict[str, AddressBookEntry] = Field(default_factory=dict)
