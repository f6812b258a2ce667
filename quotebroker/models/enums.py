#quotebroker/models/enums.py
from __future__ import annotations
from enum import Enum


class AccessRequestStatus(str, Enum):
    pending = "pending"
    granted = "granted"
    # reserved: no operation moves a request here
    denied = "denied"


ACTIVE_ACCESS_STATUSES = (AccessRequestStatus.pending.value, AccessRequestStatus.granted.value)


class CompanyType(str, Enum):
    SUBCONTRACTOR = "Underentreprenör"
    MAIN_CONTRACTOR = "Totalentreprenör"
    CLIENT = "Beställare"


CONTRACTOR_TYPES = (
    "Avfallshantering",
    "Betong",
    "Brandtätning & brandskydd",
    "El",
    "Golv",
    "Hiss",
    "Kök",
    "Kran",
    "Lås",
    "Mark",
    "Måleri",
    "Mur & Puts",
    "Plåt",
    "Rivning & sanering",
    "Bygg",
    "Solceller",
    "Städning",
    "Stommontering",
    "Ställning",
    "Styr",
    "Tak",
    "Ventilation",
    "VS",
    "Övrigt",
)
