"""
Address rules - regions, region labels and postal codes per country

Tables are keyed by ISO alpha-2; callers may pass a country name or code.
"""
import re
from typing import Dict, List, Optional, Tuple

from app.reference.countries import find_country

DEFAULT_POSTAL_MIN_LENGTH = 3
DEFAULT_POSTAL_MAX_LENGTH = 15

POSTAL_CODE_PATTERNS: Dict[str, "re.Pattern[str]"] = {
    "US": re.compile(r"^\d{5}(-\d{4})?$"),
    "UM": re.compile(r"^\d{5}(-\d{4})?$"),
    "CA": re.compile(r"^[A-Z]\d[A-Z][ -]?\d[A-Z]\d$", re.I),
    "GB": re.compile(r"^[A-Z]{1,2}\d[A-Z\d]? ?\d[A-Z]{2}$", re.I),
    "AU": re.compile(r"^\d{4}$"),
    "DE": re.compile(r"^\d{5}$"),
    "JP": re.compile(r"^\d{3}-\d{4}$"),
    "IN": re.compile(r"^\d{6}$"),
    "CN": re.compile(r"^\d{6}$"),
    "HK": re.compile(r"^\d{5}$"),
    "BR": re.compile(r"^\d{5}-?\d{3}$"),
    "MX": re.compile(r"^\d{5}$"),
    "FR": re.compile(r"^\d{5}$"),
    "IT": re.compile(r"^\d{5}$"),
    "ES": re.compile(r"^\d{5}$"),
    "NL": re.compile(r"^\d{4} ?[A-Z]{2}$", re.I),
    "BE": re.compile(r"^\d{4}$"),
    "CH": re.compile(r"^\d{4}$"),
    "AT": re.compile(r"^\d{4}$"),
    "KR": re.compile(r"^\d{5}$"),
    "NZ": re.compile(r"^\d{4}$"),
    "SG": re.compile(r"^\d{6}$"),
    "ZA": re.compile(r"^\d{4}$"),
    "IE": re.compile(r"^[A-Z\d]{3} ?[A-Z\d]{4}$", re.I),
    "PL": re.compile(r"^\d{2}-\d{3}$"),
    "SE": re.compile(r"^\d{3} ?\d{2}$"),
    "NO": re.compile(r"^\d{4}$"),
    "DK": re.compile(r"^\d{4}$"),
    "FI": re.compile(r"^\d{5}$"),
    "CZ": re.compile(r"^\d{3} ?\d{2}$"),
    "LK": re.compile(r"^\d{5}$"),
    "PT": re.compile(r"^\d{4}-?\d{3}$"),
    "GR": re.compile(r"^\d{3} ?\d{2}$"),
    "HU": re.compile(r"^\d{4}$"),
    "RO": re.compile(r"^\d{6}$"),
    "HR": re.compile(r"^\d{5}$"),
    "MD": re.compile(r"^MD-?\d{4}$", re.I),
    "UA": re.compile(r"^\d{5}$"),
    "RU": re.compile(r"^\d{6}$"),
    "TH": re.compile(r"^\d{5}$"),
    "MY": re.compile(r"^\d{5}$"),
    "ID": re.compile(r"^\d{5}$"),
    "PH": re.compile(r"^\d{4}$"),
    "VN": re.compile(r"^\d{6}$"),
    "SA": re.compile(r"^\d{5}(-\d{4})?$"),
    "AE": re.compile(r"^(?!00000)\d{5}$"),
    "IL": re.compile(r"^\d{7}$"),
    "EG": re.compile(r"^\d{5}$"),
    "TR": re.compile(r"^\d{5}$"),
    "PK": re.compile(r"^\d{5}$"),
    "BD": re.compile(r"^\d{4}$"),
    "NG": re.compile(r"^\d{6}$"),
    "KE": re.compile(r"^\d{5}$"),
    "GH": re.compile(r"^[A-Z]{2}\d{4}$", re.I),
    "AR": re.compile(r"^[A-Z]?\d{4}[A-Z]{0,3}$", re.I),
    "CL": re.compile(r"^\d{7}$"),
    "CO": re.compile(r"^\d{6}$"),
    "PE": re.compile(r"^\d{5}$"),
    "VE": re.compile(r"^\d{4}$"),
    "EC": re.compile(r"^\d{6}$"),
}

# (hint, placeholder)
POSTAL_FORMATS: Dict[str, Tuple[str, str]] = {
    "US": ("Use format: 12345 or 12345-6789", "12345 or 12345-6789"),
    "CA": ("Use format: A1A 1A1", "A1A 1A1"),
    "GB": ("Use format: SW1A 1AA", "SW1A 1AA"),
    "AU": ("Use 4-digit postcode", "2000"),
    "DE": ("Use 5-digit postal code", "10115"),
    "JP": ("Use format: 123-4567", "123-4567"),
    "IN": ("Use 6-digit PIN code", "110001"),
    "CN": ("Use 6-digit postal code", "100000"),
    "BR": ("Use format: 12345-678", "01310-100"),
    "MX": ("Use 5-digit postal code", "06600"),
    "CZ": ("Use format: 110 00", "110 00"),
    "LK": ("Use 5-digit postal code", "10100"),
    "VN": ("Use 6-digit postal code", "100000"),
}

REGION_LABELS = {
    "US": "State",
    "CA": "Province",
    "AU": "State/Territory",
    "GB": "Country/Region",
    "DE": "State",
    "JP": "Prefecture",
    "IN": "State/Union Territory",
    "CN": "Province/Region",
    "BR": "State",
    "MX": "State",
}

ADDRESS_REGIONS: Dict[str, List[str]] = {
    "US": [
        "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
        "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
        "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana",
        "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota",
        "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada",
        "New Hampshire", "New Jersey", "New Mexico", "New York",
        "North Carolina", "North Dakota", "Ohio", "Oklahoma", "Oregon",
        "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
        "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington",
        "West Virginia", "Wisconsin", "Wyoming", "District of Columbia",
    ],
    "CA": [
        "Alberta", "British Columbia", "Manitoba", "New Brunswick",
        "Newfoundland and Labrador", "Northwest Territories", "Nova Scotia",
        "Nunavut", "Ontario", "Prince Edward Island", "Quebec",
        "Saskatchewan", "Yukon",
    ],
    "AU": [
        "Australian Capital Territory", "New South Wales", "Northern Territory",
        "Queensland", "South Australia", "Tasmania", "Victoria", "Western Australia",
    ],
    "GB": ["England", "Scotland", "Wales", "Northern Ireland"],
    "DE": [
        "Baden-Württemberg", "Bavaria", "Berlin", "Brandenburg", "Bremen",
        "Hamburg", "Hesse", "Lower Saxony", "Mecklenburg-Vorpommern",
        "North Rhine-Westphalia", "Rhineland-Palatinate", "Saarland",
        "Saxony", "Saxony-Anhalt", "Schleswig-Holstein", "Thuringia",
    ],
    "JP": [
        "Hokkaido", "Aomori", "Iwate", "Miyagi", "Akita", "Yamagata",
        "Fukushima", "Ibaraki", "Tochigi", "Gunma", "Saitama", "Chiba",
        "Tokyo", "Kanagawa", "Niigata", "Toyama", "Ishikawa", "Fukui",
        "Yamanashi", "Nagano", "Gifu", "Shizuoka", "Aichi", "Mie",
        "Shiga", "Kyoto", "Osaka", "Hyogo", "Nara", "Wakayama",
        "Tottori", "Shimane", "Okayama", "Hiroshima", "Yamaguchi",
        "Tokushima", "Kagawa", "Ehime", "Kochi", "Fukuoka", "Saga",
        "Nagasaki", "Kumamoto", "Oita", "Miyazaki", "Kagoshima", "Okinawa",
    ],
    "IN": [
        "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
        "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand",
        "Karnataka", "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur",
        "Meghalaya", "Mizoram", "Nagaland", "Odisha", "Punjab", "Rajasthan",
        "Sikkim", "Tamil Nadu", "Telangana", "Tripura", "Uttar Pradesh",
        "Uttarakhand", "West Bengal", "Andaman and Nicobar Islands",
        "Chandigarh", "Dadra and Nagar Haveli and Daman and Diu", "Delhi",
        "Jammu and Kashmir", "Ladakh", "Lakshadweep", "Puducherry",
    ],
    "CN": [
        "Anhui", "Beijing", "Chongqing", "Fujian", "Gansu", "Guangdong",
        "Guangxi", "Guizhou", "Hainan", "Hebei", "Heilongjiang", "Henan",
        "Hong Kong", "Hubei", "Hunan", "Inner Mongolia", "Jiangsu", "Jiangxi",
        "Jilin", "Liaoning", "Macau", "Ningxia", "Qinghai", "Shaanxi",
        "Shandong", "Shanghai", "Shanxi", "Sichuan", "Tianjin", "Tibet",
        "Xinjiang", "Yunnan", "Zhejiang",
    ],
    "BR": [
        "Acre", "Alagoas", "Amapá", "Amazonas", "Bahia", "Ceará",
        "Distrito Federal", "Espírito Santo", "Goiás", "Maranhão",
        "Mato Grosso", "Mato Grosso do Sul", "Minas Gerais", "Pará",
        "Paraíba", "Paraná", "Pernambuco", "Piauí", "Rio de Janeiro",
        "Rio Grande do Norte", "Rio Grande do Sul", "Rondônia", "Roraima",
        "Santa Catarina", "São Paulo", "Sergipe", "Tocantins",
    ],
    "MX": [
        "Aguascalientes", "Baja California", "Baja California Sur", "Campeche",
        "Chiapas", "Chihuahua", "Coahuila", "Colima", "Durango", "Guanajuato",
        "Guerrero", "Hidalgo", "Jalisco", "México", "Michoacán", "Morelos",
        "Nayarit", "Nuevo León", "Oaxaca", "Puebla", "Querétaro",
        "Quintana Roo", "San Luis Potosí", "Sinaloa", "Sonora", "Tabasco",
        "Tamaulipas", "Tlaxcala", "Veracruz", "Yucatán", "Zacatecas",
    ],
}


def _alpha2(country: Optional[str]) -> Optional[str]:
    found = find_country(country)
    return found.alpha2 if found else None


def regions_for_country(country: Optional[str]) -> List[str]:
    return ADDRESS_REGIONS.get(_alpha2(country), [])


def region_label(country: Optional[str]) -> str:
    return REGION_LABELS.get(_alpha2(country), "State/Province/Region")


def postal_format_hint(country: Optional[str]) -> str:
    fmt = POSTAL_FORMATS.get(_alpha2(country))
    return fmt[0] if fmt else "Invalid postal code format for this country"


def postal_placeholder(country: Optional[str]) -> str:
    fmt = POSTAL_FORMATS.get(_alpha2(country))
    return fmt[1] if fmt else "ZIP/Postal code"


def validate_postal_code(zip_code: Optional[str], country: Optional[str]) -> Optional[str]:
    """
    Check a postal code against the country's format.

    Returns None when valid, otherwise the message to show.
    """
    trimmed = (zip_code or "").strip()
    if not trimmed:
        return "ZIP/Postal code is required"

    pattern = POSTAL_CODE_PATTERNS.get(_alpha2(country))
    if pattern is not None:
        if not pattern.match(trimmed):
            return postal_format_hint(country)
        return None

    if len(trimmed) < DEFAULT_POSTAL_MIN_LENGTH:
        return f"Postal code must be at least {DEFAULT_POSTAL_MIN_LENGTH} characters"
    if len(trimmed) > DEFAULT_POSTAL_MAX_LENGTH:
        return f"Postal code must be at most {DEFAULT_POSTAL_MAX_LENGTH} characters"
    return None


def validate_state(state: Optional[str], country: Optional[str]) -> Optional[str]:
    """Region must be one of the known regions when the country has a list"""
    trimmed = (state or "").strip()
    if not trimmed:
        return "State/Province/Region is required"

    regions = regions_for_country(country)
    if regions:
        if trimmed.lower() not in (r.lower() for r in regions):
            found = find_country(country)
            return f"Please select a valid state/province/region for {found.name if found else country}"
        return None

    if len(trimmed) < 2:
        return "State/Province/Region must be at least 2 characters"
    return None
