"""
Vehicle document API (metadata only, files live in external storage)
"""
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.deps import get_db
from app.models import VehicleDocument
from app.models.enums import DocumentCategory, ShippingStage
from app.schemas.vehicle_document import VehicleDocumentCreate, VehicleDocumentResponse
from app.services.shipping_stages import get_vehicle

router = APIRouter()


@router.get("/{vehicle_id}/documents", response_model=List[VehicleDocumentResponse])
async def list_documents(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    stage: Optional[ShippingStage] = Query(None),
    category: Optional[DocumentCategory] = Query(None)) -> Any:
    """Documents of a vehicle"""
    await get_vehicle(db, vehicle_id)
    query = select(VehicleDocument).where(VehicleDocument.vehicle_id == vehicle_id)
    if stage:
        query = query.where(VehicleDocument.stage == stage.value)
    if category:
        query = query.where(VehicleDocument.category == category.value)
    result = await db.execute(query.order_by(VehicleDocument.created_at.desc(), VehicleDocument.id.desc()))
    return [VehicleDocumentResponse.model_validate(d) for d in result.scalars().all()]


@router.post("/{vehicle_id}/documents", response_model=VehicleDocumentResponse, status_code=201)
async def create_document(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    document_in: VehicleDocumentCreate) -> Any:
    """Attach an already uploaded file"""
    await get_vehicle(db, vehicle_id)
    document = VehicleDocument(vehicle_id=vehicle_id, **document_in.model_dump())
    db.add(document)
    await db.commit()
    await db.refresh(document)
    return VehicleDocumentResponse.model_validate(document)


@router.delete("/{vehicle_id}/documents/{document_id}")
async def delete_document(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    document_id: int) -> Any:
    """Delete a document record"""
    document = await db.get(VehicleDocument, document_id)
    if not document or document.vehicle_id != vehicle_id:
        raise HTTPException(status_code=404, detail="Document not found")
    await db.delete(document)
    await db.commit()
    return {"success": True}
