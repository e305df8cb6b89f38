"""
Schemas pour les fournisseurs, leurs représentants et habilitations
"""

from datetime import date, datetime
from pydantic import BaseModel, Field


class ProviderBase(BaseModel):
    designation_lt: str | None = Field(None, max_length=200, description="Raison sociale (latin)")
    designation_ar: str | None = Field(None, max_length=200, description="Raison sociale (arabe)")
    acronym_lt: str | None = Field(None, max_length=20)
    acronym_ar: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=200)
    capital: float | None = Field(None, description="Capital social")
    commercial_registry_number: str | None = Field(None, max_length=200, description="N° registre du commerce")
    commercial_registry_date: date | None = None
    tax_identity_number: str | None = Field(None, max_length=200, description="N° d'identification fiscale")
    stat_identity_number: str | None = Field(None, max_length=200, description="N° d'identification statistique")
    bank: str | None = Field(None, max_length=200)
    bank_account: str | None = Field(None, max_length=50)
    swift_number: str | None = Field(None, max_length=50)
    phone_numbers: str | None = Field(None, max_length=200)
    fax_numbers: str | None = Field(None, max_length=200)
    mail: str | None = Field(None, max_length=300)
    website: str | None = Field(None, max_length=200)
    economic_nature_id: int | None = Field(None, description="Nature économique")


class ProviderCreate(ProviderBase):
    pass


class ProviderUpdate(ProviderBase):
    pass


class ProviderResponse(ProviderBase):
    id: int
    economic_nature_id: int
    display_name: str
    economic_nature_designation: str | None = None
    business_size: str
    provider_type: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    class Config:
        from_attributes = True


class RepresentatorBase(BaseModel):
    firstname: str | None = Field(None, max_length=50)
    lastname: str | None = Field(None, max_length=50)
    birth_date: str | None = Field(None, max_length=200)
    birth_place: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=100)
    job_title: str | None = Field(None, max_length=50)
    mobile_phone_number: str | None = Field(None, max_length=100)
    fix_phone_number: str | None = Field(None, max_length=100)
    mail: str | None = Field(None, max_length=100)
    provider_id: int | None = None


class RepresentatorCreate(RepresentatorBase):
    pass


class RepresentatorUpdate(RepresentatorBase):
    pass


class RepresentatorResponse(RepresentatorBase):
    id: int
    firstname: str
    lastname: str
    provider_id: int
    full_name: str
    provider_designation: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ClearanceBase(BaseModel):
    start_date: date | None = None
    end_date: date | None = Field(None, description="Vide pour une habilitation permanente")
    provider_id: int | None = None
    provider_representator_id: int | None = None


class ClearanceCreate(ClearanceBase):
    pass


class ClearanceUpdate(ClearanceBase):
    pass


class ClearanceResponse(ClearanceBase):
    id: int
    provider_id: int
    provider_representator_id: int
    representator_name: str | None = None
    status: str
    clearance_type: str
    is_permanent: bool
    is_active: bool
    validity_duration_days: int | None = None
    remaining_days: int | None = None
    alert_level: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
