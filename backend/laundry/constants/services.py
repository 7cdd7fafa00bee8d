"""Service catalogue: the laundry services a hub may offer, their per-garment
price (whole currency units) and promised turnaround.

Extend cautiously; existing orders store the service value string, so never rename
a value silently.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ServiceType(str, Enum):
    WASH_FOLD = 'wash_fold'
    DRY_CLEANING = 'dry_cleaning'
    IRONING = 'ironing'


@dataclass(frozen=True)
class ServiceInfo:
    name: str
    unit_price: int
    turnaround_hours: int


SERVICE_CATALOGUE: Dict[ServiceType, ServiceInfo] = {
    ServiceType.WASH_FOLD: ServiceInfo('Wash & Fold', 50, 24),
    ServiceType.DRY_CLEANING: ServiceInfo('Dry Cleaning', 120, 48),
    ServiceType.IRONING: ServiceInfo('Ironing Only', 30, 12),
}

ALL_SERVICE_TYPES = tuple(s.value for s in ServiceType)


def unit_price(service_type) -> int:
    return SERVICE_CATALOGUE[ServiceType(service_type)].unit_price


def turnaround_hours(service_type) -> int:
    return SERVICE_CATALOGUE[ServiceType(service_type)].turnaround_hours


def catalogue_json():
    return [
        {'id': st.value, 'name': info.name, 'unit_price': info.unit_price, 'turnaround_hours': info.turnaround_hours}
        for st, info in SERVICE_CATALOGUE.items()
    ]


__all__ = ['ServiceType', 'ServiceInfo', 'SERVICE_CATALOGUE', 'ALL_SERVICE_TYPES', 'unit_price', 'turnaround_hours', 'catalogue_json']
