from enum import Enum


class Environment(str, Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"


class ShortcodeType(str, Enum):
    PAYBILL = "paybill"
    TILL = "till"


class OperationKind(str, Enum):
    """Outbound Daraja operations, one endpoint each."""

    STK_PUSH = "stk_push"
    STK_QUERY = "stk_query"
    C2B_REGISTER = "c2b_register"
    C2B_SIMULATE = "c2b_simulate"
    B2C_PAYMENT = "b2c_payment"
    B2B_TRANSFER = "b2b_transfer"
    TRANSACTION_STATUS = "transaction_status"
    ACCOUNT_BALANCE = "account_balance"
    REVERSAL = "reversal"
    QR_CODE = "qr_code"


class QRTransactionType(Enum):
    """Dynamic QR transaction types and the TrxCode Daraja expects for each."""

    BUY_GOODS = ("BG", "Buy Goods", "Till Number")
    PAY_BILL = ("PB", "Pay Bill", "Paybill Number")
    SEND_MONEY = ("SM", "Send Money", "Phone Number")
    WITHDRAW = ("WA", "Withdraw", "Agent Number")
    SEND_TO_BUSINESS = ("SB", "Send to Business", "Business Number")

    def __init__(self, code, display_name, target_type):
        self.code = code
        self.display_name = display_name
        self.target_type = target_type

    @classmethod
    def from_code(cls, code: str) -> "QRTransactionType":
        for member in cls:
            if member.code == code:
                return member
        raise ValueError(f"Unknown QR transaction type code: {code}")
