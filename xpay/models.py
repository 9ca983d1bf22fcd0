from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    SUCCESS = "SUCCESS"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


class OrderType(str, Enum):
    PAYOUT = "PAYOUT"
    COLLECTION = "COLLECTION"


class WebhookNotifyType(str, Enum):
    ORDER_PENDING = "ORDER_PENDING"
    ORDER_PENDING_CONFIRMATION = "ORDER_PENDING_CONFIRMATION"
    ORDER_SUCCESS = "ORDER_SUCCESS"
    ORDER_FAILED = "ORDER_FAILED"
    ORDER_EXPIRED = "ORDER_EXPIRED"
    COLLECT_PENDING = "COLLECT_PENDING"
    COLLECT_SUCCESS = "COLLECT_SUCCESS"
    COLLECT_FAILED = "COLLECT_FAILED"


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class _SignedRequest(_ApiModel):
    def to_payload(self) -> dict[str, Any]:
        """Field values keyed by wire name, in declaration order, unset optionals omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PayoutRequest(_SignedRequest):
    amount: Decimal
    symbol: str
    chain: str
    order_id: str = Field(alias="orderId")
    uid: Optional[str] = None
    receive_address: Optional[str] = Field(default=None, alias="receiveAddress")


class CollectionRequest(_SignedRequest):
    amount: Decimal
    symbol: str
    chain: str
    order_id: str = Field(alias="orderId")
    uid: Optional[str] = None


class PayoutOrder(_ApiModel):
    order_id: str = Field(alias="orderId")
    status: OrderStatus
    amount: Decimal
    symbol: str
    chain: str
    uid: Optional[str] = None
    receive_address: Optional[str] = Field(default=None, alias="receiveAddress")


class PayoutResponse(_ApiModel):
    code: int
    msg: str
    data: Optional[PayoutOrder] = None


class CollectionOrder(_ApiModel):
    address: str
    amount: Decimal
    symbol: str
    chain: str
    uid: Optional[str] = None
    order_id: str = Field(alias="orderId")
    expired_time: int = Field(alias="expiredTime")


class CollectionResponse(_ApiModel):
    code: int
    msg: str
    data: Optional[CollectionOrder] = None


class OrderTransaction(_ApiModel):
    chain: Optional[str] = None
    symbol: Optional[str] = None
    block_num: Optional[int] = Field(default=None, alias="blockNum")
    txid: Optional[str] = None
    contract_address: Optional[str] = Field(default=None, alias="contractAddress")
    from_address: Optional[str] = Field(default=None, alias="from")
    to_address: Optional[str] = Field(default=None, alias="to")
    amount: Decimal
    timestamp: Optional[int] = None
    tx_gas: Optional[Decimal] = Field(default=None, alias="txGas")
    confirmed_num: int = Field(default=0, alias="confirmedNum")
    status: Optional[str] = None


class OrderInfo(_ApiModel):
    order_id: str = Field(alias="orderId")
    order_type: OrderType = Field(alias="orderType")
    status: OrderStatus
    reason: Optional[str] = None
    transaction: Optional[OrderTransaction] = None


class OrderDetails(_ApiModel):
    code: int
    msg: str
    data: Optional[OrderInfo] = None


class SupportedSymbol(_ApiModel):
    symbol: str
    chain: str
    decimals: int
    contract: Optional[str] = None
    min_amount: Optional[Decimal] = Field(default=None, alias="minAmount")
    max_amount: Optional[Decimal] = Field(default=None, alias="maxAmount")


class SupportedSymbolsResponse(_ApiModel):
    code: int
    msg: str
    data: List[SupportedSymbol] = Field(default_factory=list)


class ErrorResponse(_ApiModel):
    success: bool = False
    code: Optional[int] = None
    message: Optional[str] = None
    data: Any = None


class WebhookTransaction(_ApiModel):
    chain: str
    symbol: str
    block_num: int = Field(alias="blockNum")
    txid: str
    contract_address: Optional[str] = Field(default=None, alias="contractAddress")
    from_address: str = Field(alias="from")
    to_address: str = Field(alias="to")
    amount: Decimal
    timestamp: int
    tx_gas: Decimal = Field(alias="txGas")
    confirmed_num: int = Field(alias="confirmedNum")
    status: str


class OrderWebhookData(_ApiModel):
    order_id: str = Field(alias="orderId")
    order_type: OrderType = Field(alias="orderType")
    status: OrderStatus
    reason: Optional[str] = None
    transaction: WebhookTransaction


class CollectWebhookData(_ApiModel):
    collect_amount: Decimal = Field(alias="collectAmount")
    fee: Decimal
    fee_ratio: Decimal = Field(alias="feeRatio")
    reason: Optional[str] = None
    transaction: WebhookTransaction


# Scalar shapes a signed body field can take.
WebhookScalar = Union[str, bool, int, Decimal]


class WebhookEvent(_ApiModel):
    """A verified notification, holding the body's own field values."""

    sign: Any = None
    timestamp: Optional[WebhookScalar] = None
    nonce: WebhookScalar
    notify_type: WebhookScalar = Field(alias="notifyType")
    # An object, or an empty value that was signed as {}.
    data: Any = None

    @property
    def is_order_event(self) -> bool:
        return str(self.notify_type).startswith("ORDER_")

    @property
    def is_collect_event(self) -> bool:
        return str(self.notify_type).startswith("COLLECT_")

    def order_data(self) -> OrderWebhookData:
        if not self.is_order_event:
            raise ValueError(f"{self.notify_type} is not an order notification")
        return OrderWebhookData.model_validate(self.data or {})

    def collect_data(self) -> CollectWebhookData:
        if not self.is_collect_event:
            raise ValueError(f"{self.notify_type} is not a collection notification")
        return CollectWebhookData.model_validate(self.data or {})
