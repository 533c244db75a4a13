"""
Shared enums - the values double as the wire format
"""

import enum


class ShippingStage(str, enum.Enum):
    PURCHASE = "PURCHASE"
    TRANSPORT = "TRANSPORT"
    REPAIR = "REPAIR"
    DOCUMENTS = "DOCUMENTS"
    BOOKING = "BOOKING"
    SHIPPED = "SHIPPED"
    DHL = "DHL"


STAGE_ORDER = list(ShippingStage)

STAGE_LABELS = {
    ShippingStage.PURCHASE: "Purchase",
    ShippingStage.TRANSPORT: "Transport",
    ShippingStage.REPAIR: "Repair",
    ShippingStage.DOCUMENTS: "Documents",
    ShippingStage.BOOKING: "Booking",
    ShippingStage.SHIPPED: "Shipped",
    ShippingStage.DHL: "Completed",
}


class BookingType(str, enum.Enum):
    RORO = "RORO"
    CONTAINER = "CONTAINER"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class VendorCategory(str, enum.Enum):
    DEALERSHIP = "DEALERSHIP"
    AUCTION_HOUSE = "AUCTION_HOUSE"
    TRANSPORT_VENDOR = "TRANSPORT_VENDOR"
    GARAGE = "GARAGE"
    FREIGHT_VENDOR = "FREIGHT_VENDOR"
    FORWARDING_VENDOR = "FORWARDING_VENDOR"
    FORWARDER = "FORWARDER"
    SHIPPING_AGENT = "SHIPPING_AGENT"
    YARD = "YARD"


class DocumentCategory(str, enum.Enum):
    INVOICE = "INVOICE"
    PHOTOS = "PHOTOS"
    EXPORT_CERTIFICATE = "EXPORT_CERTIFICATE"
    DEREGISTRATION_CERTIFICATE = "DEREGISTRATION_CERTIFICATE"
    INSURANCE_REFUND = "INSURANCE_REFUND"
    SHIPPING_INSTRUCTIONS = "SHIPPING_INSTRUCTIONS"
    SHIPPING_ORDER = "SHIPPING_ORDER"
    BILL_OF_LADING = "BILL_OF_LADING"
    LETTER_OF_CREDIT = "LETTER_OF_CREDIT"
    EXPORT_DECLARATION = "EXPORT_DECLARATION"
    RECYCLE_APPLICATION = "RECYCLE_APPLICATION"
    DHL_TRACKING = "DHL_TRACKING"
    RELEASED_BILL_OF_LADING = "RELEASED_BILL_OF_LADING"
    AUCTION_SHEET = "AUCTION_SHEET"
    OTHER = "OTHER"


class InquirySource(str, enum.Enum):
    WEB = "WEB"
    EMAIL = "EMAIL"
    WHATSAPP = "WHATSAPP"
    CHATBOT = "CHATBOT"
    INQUIRY_FORM = "INQUIRY_FORM"
    STOCK_INQUIRY = "STOCK_INQUIRY"
    JCT_STOCK_INQUIRY = "JCT_STOCK_INQUIRY"
    HERO_INQUIRY = "HERO_INQUIRY"
    ONBOARDING_FORM = "ONBOARDING_FORM"


class InquiryStatus(str, enum.Enum):
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    QUALIFIED = "QUALIFIED"
    DEPOSIT = "DEPOSIT"
    CLOSED_WON = "CLOSED_WON"
    CLOSED_LOST = "CLOSED_LOST"
    RECURRING = "RECURRING"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    FINALIZED = "FINALIZED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class TransactionDirection(str, enum.Enum):
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"


class TransactionType(str, enum.Enum):
    BANK_TRANSFER = "BANK_TRANSFER"
    PAYPAL = "PAYPAL"
    CASH = "CASH"
    WISE = "WISE"
