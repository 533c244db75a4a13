"""
Reference data API (read only)
"""
from typing import Any, Optional
from fastapi import APIRouter, HTTPException, Query

from app.reference.address import (
    postal_format_hint,
    postal_placeholder,
    region_label,
    regions_for_country,
    validate_postal_code,
    validate_state)
from app.reference.countries import COUNTRIES, find_country, phone_code_options
from app.reference.phone import validate_phone_number

router = APIRouter()


@router.get("/countries")
async def list_countries() -> Any:
    """Every country with ISO codes and dialling code"""
    return [
        {
            "name": c.name,
            "alpha2": c.alpha2,
            "alpha3": c.alpha3,
            "numeric": c.numeric,
            "phoneCode": c.phone_code,
        }
        for c in sorted(COUNTRIES, key=lambda c: c.name)
    ]


@router.get("/phone-codes")
async def list_phone_codes() -> Any:
    """Dialling codes for a picker"""
    return phone_code_options()


@router.get("/countries/{country}/address")
async def country_address_rules(country: str) -> Any:
    """Regions, region label and postal code format for one country"""
    found = find_country(country)
    if not found:
        raise HTTPException(status_code=404, detail="Country not found")
    return {
        "country": found.name,
        "alpha2": found.alpha2,
        "phoneCode": found.phone_code,
        "regionLabel": region_label(found.name),
        "regions": regions_for_country(found.name),
        "postalHint": postal_format_hint(found.name),
        "postalPlaceholder": postal_placeholder(found.name),
    }


@router.get("/validate/postal-code")
async def check_postal_code(
    zip_code: str = Query(..., alias="zipCode"),
    country: str = Query(...)) -> Any:
    """Postal code check"""
    message = validate_postal_code(zip_code, country)
    return {"valid": message is None, "message": message}


@router.get("/validate/state")
async def check_state(
    state: str = Query(...),
    country: str = Query(...)) -> Any:
    """Region check"""
    message = validate_state(state, country)
    return {"valid": message is None, "message": message}


@router.get("/validate/phone")
async def check_phone(
    phone: str = Query(...),
    country_code: Optional[str] = Query(None, alias="countryCode")) -> Any:
    """Phone number check"""
    message = validate_phone_number(phone, country_code)
    return {"valid": message is None, "message": message}
