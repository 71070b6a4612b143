from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.common.validators import validate_cuit, format_cuit, is_valid_email


class PartyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre o razón social")
    address: Optional[str] = Field(None, description="Domicilio")
    tax_id: Optional[str] = Field(None, max_length=13, description="CUIT (XX-XXXXXXXX-X)")
    email: Optional[str] = Field(None, max_length=120)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator('tax_id')
    @classmethod
    def validate_tax_id(cls, v):
        if v is None or v.strip() == "":
            return None
        if not validate_cuit(v):
            raise ValueError('CUIT inválido. Debe tener 11 dígitos y dígito verificador correcto')
        return format_cuit(v)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v is None or v.strip() == "":
            return None
        if not is_valid_email(v):
            raise ValueError('Email debe tener formato válido')
        return v


class PartyCreate(PartyBase):
    pass


class PartyUpdate(PartyBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class PartyOut(PartyBase):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
