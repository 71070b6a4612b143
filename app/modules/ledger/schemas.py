from pydantic import BaseModel, field_serializer
from decimal import Decimal
from uuid import UUID

from app.modules.ledger.money import round2


class BalanceOut(BaseModel):
    party_id: UUID
    party_name: str
    total_invoiced: Decimal
    total_collected: Decimal
    saldo: Decimal

    class Config:
        from_attributes = True

    @field_serializer('total_invoiced', 'total_collected', 'saldo')
    def serialize_amount(self, value: Decimal) -> str:
        return f"{round2(value):.2f}"
