"""
Modèles du registre des fournisseurs : natures économiques, types d'exclusion,
fournisseurs, représentants et habilitations
"""

from datetime import datetime, date

from sqlalchemy import (
    Column, Integer, String, Float, Date, ForeignKey
)
from sqlalchemy.orm import relationship

from procurement.classification import (
    economic_nature_type, exclusion_category, provider_type, business_size_category,
)
from procurement.database import Base
from procurement.models.mixins import AuditMixin, DesignationMixin, AcronymMixin


class EconomicNature(AuditMixin, DesignationMixin, AcronymMixin, Base):
    __tablename__ = "economic_natures"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<EconomicNature(id={self.id}, acronym_fr='{self.acronym_fr}')>"

    @property
    def category(self) -> str:
        return economic_nature_type(self.designation_fr, self.acronym_fr)


class ExclusionType(AuditMixin, DesignationMixin, Base):
    __tablename__ = "exclusion_types"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<ExclusionType(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return exclusion_category(self.designation_fr)


class Provider(AuditMixin, Base):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    designation_lt = Column(String(200), nullable=True, index=True, comment="Raison sociale en caractères latins")
    designation_ar = Column(String(200), nullable=True)
    acronym_lt = Column(String(20), nullable=True)
    acronym_ar = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)
    capital = Column(Float, nullable=True)
    commercial_registry_number = Column(String(200), nullable=True, unique=True)
    commercial_registry_date = Column(Date, nullable=True)
    tax_identity_number = Column(String(200), nullable=True, unique=True)
    stat_identity_number = Column(String(200), nullable=True, unique=True)
    bank = Column(String(200), nullable=True)
    bank_account = Column(String(50), nullable=True)
    swift_number = Column(String(50), nullable=True)
    phone_numbers = Column(String(200), nullable=True)
    fax_numbers = Column(String(200), nullable=True)
    mail = Column(String(300), nullable=True)
    website = Column(String(200), nullable=True)
    economic_nature_id = Column(
        Integer,
        ForeignKey("economic_natures.id"),
        nullable=False,
        index=True,
    )

    # Relations
    economic_nature = relationship("EconomicNature")
    representators = relationship(
        "ProviderRepresentator", back_populates="provider", cascade="all, delete-orphan"
    )
    clearances = relationship("Clearance", back_populates="provider", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="tender")

    def __repr__(self):
        return f"<Provider(id={self.id}, designation='{self.display_name}')>"

    @property
    def display_name(self) -> str:
        return self.designation_lt or self.designation_ar or ""

    @property
    def economic_nature_designation(self) -> str | None:
        return self.economic_nature.designation_fr if self.economic_nature else None

    @property
    def business_size(self) -> str:
        return business_size_category(self.capital)

    @property
    def provider_type(self) -> str:
        nature = self.economic_nature.category if self.economic_nature else None
        return provider_type(nature)


class ProviderRepresentator(AuditMixin, Base):
    __tablename__ = "provider_representators"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    firstname = Column(String(50), nullable=False)
    lastname = Column(String(50), nullable=False, index=True)
    birth_date = Column(String(200), nullable=True)
    birth_place = Column(String(100), nullable=True)
    address = Column(String(100), nullable=True)
    job_title = Column(String(50), nullable=True)
    mobile_phone_number = Column(String(100), nullable=True, unique=True)
    fix_phone_number = Column(String(100), nullable=True)
    mail = Column(String(100), nullable=True, unique=True)
    provider_id = Column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relations
    provider = relationship("Provider", back_populates="representators")
    clearances = relationship("Clearance", back_populates="representator")

    def __repr__(self):
        return f"<ProviderRepresentator(id={self.id}, name='{self.full_name}')>"

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"

    @property
    def provider_designation(self) -> str | None:
        return self.provider.display_name if self.provider else None


class Clearance(AuditMixin, Base):
    """Habilitation d'un représentant à agir pour un fournisseur sur une période"""
    __tablename__ = "clearances"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True, comment="Absente pour une habilitation permanente")
    provider_id = Column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider_representator_id = Column(
        Integer,
        ForeignKey("provider_representators.id"),
        nullable=False,
        index=True,
    )

    # Relations
    provider = relationship("Provider", back_populates="clearances")
    representator = relationship("ProviderRepresentator", back_populates="clearances")

    def __repr__(self):
        return f"<Clearance(id={self.id}, provider_id={self.provider_id}, status='{self.status}')>"

    @staticmethod
    def _today() -> date:
        return datetime.utcnow().date()

    @property
    def representator_name(self) -> str | None:
        return self.representator.full_name if self.representator else None

    @property
    def is_permanent(self) -> bool:
        return self.end_date is None

    @property
    def is_future(self) -> bool:
        return self.start_date is not None and self.start_date > self._today()

    @property
    def is_expired(self) -> bool:
        return self.end_date is not None and self.end_date < self._today()

    @property
    def is_active(self) -> bool:
        return not self.is_future and not self.is_expired

    @property
    def status(self) -> str:
        if self.is_future:
            return "FUTURE"
        if self.is_expired:
            return "EXPIRED"
        return "ACTIVE"

    @property
    def validity_duration_days(self) -> int | None:
        if self.start_date is None or self.end_date is None:
            return None
        return abs((self.end_date - self.start_date).days)

    @property
    def remaining_days(self) -> int | None:
        """Jours de validité restants (None si permanente, 0 si expirée)"""
        if self.end_date is None:
            return None
        if self.is_expired:
            return 0
        return (self.end_date - self._today()).days

    @property
    def clearance_type(self) -> str:
        if self.is_permanent:
            return "PERMANENT_CLEARANCE"
        duration = self.validity_duration_days
        if duration is None:
            return "INDEFINITE_CLEARANCE"
        if duration <= 30:
            return "SHORT_TERM_CLEARANCE"
        if duration <= 365:
            return "MEDIUM_TERM_CLEARANCE"
        return "LONG_TERM_CLEARANCE"

    @property
    def alert_level(self) -> str:
        remaining = self.remaining_days
        if remaining is None:
            return "NONE"
        if remaining <= 7:
            return "CRITICAL"
        if remaining <= 30:
            return "WARNING"
        if remaining <= 90:
            return "INFO"
        return "NONE"
