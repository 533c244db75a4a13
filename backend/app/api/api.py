"""API router aggregation - single tenant back office (no auth)"""
from fastapi import APIRouter

from app.api.endpoints import (
    customers, vendors, yards, vehicles, vehicle_stages, vehicle_costs,
    vehicle_documents, inquiries, kanban, invoices, transactions, reference
)

api_router = APIRouter()

# CRM
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(inquiries.router, prefix="/inquiries", tags=["inquiries"])
api_router.include_router(kanban.router, prefix="/kanban", tags=["kanban"])

# vehicles and shipping workflow
api_router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
api_router.include_router(vehicle_stages.router, prefix="/vehicles", tags=["shipping stages"])
api_router.include_router(vehicle_costs.router, prefix="/vehicles", tags=["vehicle costs"])
api_router.include_router(vehicle_documents.router, prefix="/vehicles", tags=["vehicle documents"])
api_router.include_router(vendors.router, prefix="/vendors", tags=["vendors"])
api_router.include_router(yards.router, prefix="/yards", tags=["yards"])

# finance
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["transactions"])

api_router.include_router(reference.router, prefix="/reference", tags=["reference data"])
