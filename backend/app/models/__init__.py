# models package - importing it registers every table on Base.metadata

from app.models.customer import Customer
from app.models.vendor import Vendor, Yard
from app.models.inquiry import Inquiry, InquiryHistory, KanbanStage
from app.models.vehicle import Vehicle
from app.models.shipping_stage import VehicleShippingStage, VehicleStageHistory
from app.models.vehicle_cost import VehicleStageCost
from app.models.vehicle_document import VehicleDocument
from app.models.invoice import Invoice, InvoiceCharge
from app.models.transaction import Transaction

__all__ = [
    "Customer",
    "Vendor",
    "Yard",
    "Inquiry",
    "InquiryHistory",
    "KanbanStage",
    "Vehicle",
    "VehicleShippingStage",
    "VehicleStageHistory",
    "VehicleStageCost",
    "VehicleDocument",
    "Invoice",
    "InvoiceCharge",
    "Transaction",
]
