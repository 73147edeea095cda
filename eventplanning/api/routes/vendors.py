"""
Vendor API routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.vendor import VendorCreate, VendorResponse, VendorUpdate
from eventplanning.services.vendor_service import vendor_service

router = APIRouter(prefix="/vendors", tags=["Vendors"])


@router.get("", response_model=List[VendorResponse])
async def search_vendors(q: Optional[str] = Query(None, description="Fragment of name or category")):
    return await vendor_service.search_vendors(q)


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(vendor_id: int = Path(..., ge=1)):
    return await vendor_service.get_vendor(vendor_id)


@router.post("", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor(vendor_data: VendorCreate, principal: Principal = Depends(get_current_principal)):
    """List a vendor. Vendor accounts and admins only."""
    return await vendor_service.create_vendor(vendor_data, principal)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_data: VendorUpdate,
    vendor_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await vendor_service.update_vendor(vendor_id, vendor_data, principal)


@router.patch("/{vendor_id}/approve", response_model=VendorResponse)
async def approve_vendor(vendor_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await vendor_service.approve_vendor(vendor_id, principal)


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(vendor_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await vendor_service.delete_vendor(vendor_id, principal)
