"""
UPS Rate Request Mapper

Pure translation of a domain RateRequest into the UPS Rating API payload.
"""
from typing import Any, Dict, List

from carrier_rates.schemas.rates import Address, Package, RateRequest

PACKAGING_TYPE_CODE = "02"  # Customer Supplied Package
PACKAGING_TYPE_DESC = "Package"
PAYMENT_TYPE_TRANSPORTATION = "01"

WEIGHT_UNITS = {
    "lb": {"Code": "LBS", "Description": "Pounds"},
    "kg": {"Code": "KGS", "Description": "Kilograms"},
}
DIMENSION_UNITS = {
    "in": {"Code": "IN", "Description": "Inches"},
    "cm": {"Code": "CM", "Description": "Centimeters"},
}

# UPS rejects packages without a Dimensions block
PLACEHOLDER_DIMENSIONS = {
    "UnitOfMeasurement": dict(DIMENSION_UNITS["in"]),
    "Length": "1",
    "Width": "1",
    "Height": "1",
}


def format_number(value: float) -> str:
    """Render a number the way UPS expects: 5.0 -> "5", 2.5 -> "2.5"."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def map_address_to_ups(address: Address) -> Dict[str, Any]:
    lines = [address.address_line1]
    if address.address_line2:
        lines.append(address.address_line2)
    return {
        "AddressLine": lines,
        "City": address.city,
        "StateProvinceCode": address.state_or_province_code,
        "PostalCode": address.postal_code,
        "CountryCode": address.country_code,
    }


def map_package_to_ups(package: Package) -> Dict[str, Any]:
    if package.dimensions:
        dims = package.dimensions
        dimensions = {
            "UnitOfMeasurement": dict(DIMENSION_UNITS[dims.unit]),
            "Length": format_number(dims.length),
            "Width": format_number(dims.width),
            "Height": format_number(dims.height),
        }
    else:
        dimensions = {
            **PLACEHOLDER_DIMENSIONS,
            "UnitOfMeasurement": dict(PLACEHOLDER_DIMENSIONS["UnitOfMeasurement"]),
        }

    return {
        "PackagingType": {"Code": PACKAGING_TYPE_CODE, "Description": PACKAGING_TYPE_DESC},
        "Dimensions": dimensions,
        "PackageWeight": {
            "UnitOfMeasurement": dict(WEIGHT_UNITS[package.weight.unit]),
            "Weight": format_number(package.weight.value),
        },
    }


def map_rate_request_to_ups_payload(request: RateRequest, account_number: str = "") -> Dict[str, Any]:
    """
    Build the UPS RateRequest payload.

    A single package is sent as an object under "Package", several as a list.
    """
    origin = map_address_to_ups(request.origin)
    destination = map_address_to_ups(request.destination)

    ups_packages: List[Dict[str, Any]] = [map_package_to_ups(p) for p in request.packages]

    shipment: Dict[str, Any] = {
        "Shipper": {
            "Name": request.origin.address_line1,
            "ShipperNumber": account_number,
            "Address": origin,
        },
        "ShipTo": {
            "Name": request.destination.address_line1,
            "Address": destination,
        },
        "ShipFrom": {
            "Name": request.origin.address_line1,
            "Address": dict(origin, AddressLine=list(origin["AddressLine"])),
        },
        "PaymentDetails": {
            "ShipmentCharge": [
                {
                    "Type": PAYMENT_TYPE_TRANSPORTATION,
                    "BillShipper": {"AccountNumber": account_number},
                }
            ],
        },
        "NumOfPieces": str(len(ups_packages)),
        "Package": ups_packages[0] if len(ups_packages) == 1 else ups_packages,
    }

    if request.service_level:
        shipment["Service"] = {
            "Code": request.service_level,
            "Description": request.service_level,
        }

    return {
        "RateRequest": {
            "Request": {},
            "Shipment": shipment,
        }
    }
