"""
Sample requisitions for mock mode, so the dashboard has something to show
before a real database is wired in.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from requisition_portal.models.enums import RequisitionStatus
from requisition_portal.models.schemas import (
    ConditionsAndAnnexes,
    FinancialSummary,
    LineItem,
    RequisitionRecord,
)

logger = logging.getLogger(__name__)


def _financial(subtotal: float) -> FinancialSummary:
    iva = round(subtotal * 0.16, 2)
    return FinancialSummary(subtotal=subtotal, iva_percent=16, iva_amount=iva, total=subtotal + iva)


def sample_requisitions() -> list[RequisitionRecord]:
    office_supplies = [
        LineItem(
            partida=1,
            cucop="14111506 - Papel bond",
            quantity=50,
            unit_of_measure="Cajas",
            unit_price=350.00,
            amount=17500.00,
            description="Papel bond blanco, tamaño carta, 75g",
        ),
        LineItem(
            partida=2,
            cucop="21101501 - Papel bond",
            quantity=2,
            unit_of_measure="Unidad",
            unit_price=800.00,
            amount=1600.00,
            description="Tóner negro compatible para modelo XYZ",
        ),
    ]

    rows = [
        ("1", "REQ-2024-001", "Dirección de Recursos Materiales", "Almacén Central",
         RequisitionStatus.PENDING_REVIEW, 1, 15),
        ("2", "REQ-2024-002", "Dirección de Tecnologías de la Información", "Oficinas Centrales",
         RequisitionStatus.AUTHORIZED, 1, 20),
        ("3", "REQ-2024-003", "Dirección de Recursos Humanos", "Departamento de RH",
         RequisitionStatus.IN_CAPTURE, 2, 18),
        ("4", "REQ-2024-004", "Dirección de Servicios Generales", "Edificio Administrativo",
         RequisitionStatus.RETURNED_FOR_CORRECTION, 2, 25),
        ("5", "REQ-2024-005", "Dirección de Recursos Materiales", "Almacén Central",
         RequisitionStatus.IN_AUTHORIZATION, 3, 22),
    ]

    records = []
    for rid, folio, unit, place, status, day, max_day in rows:
        records.append(
            RequisitionRecord(
                id=rid,
                folio=folio,
                administrative_unit=unit,
                reception_date=date(2024, 10, day),
                max_delivery_date=date(2024, 10, max_day),
                elaboration_date=date(2024, 10, day),
                delivery_place=place,
                items=office_supplies,
                financial=_financial(19100.00),
                conditions=ConditionsAndAnnexes(
                    budget_authorization="AUT-2025-45",
                    authorization_number="AUT-2025-45",
                    manufacturing_time="15 días",
                    multiyear="12",
                    annexes="Contrato_2025_001.pdf",
                    sanitary_registration="REG-SAN-2024-001",
                    standards="NOM-001-SSA1-2010",
                ),
                status=status,
                created_at=datetime(2024, 10, day, 9, int(rid), tzinfo=timezone.utc),
            )
        )
    return records


def seed_repository(repository) -> int:
    """Insert the sample requisitions into an empty repository."""
    if repository.count() > 0:
        return 0
    records = sample_requisitions()
    for record in records:
        repository.insert(record)
    logger.info(f"Seeded {len(records)} sample requisitions")
    return len(records)
