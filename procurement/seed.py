"""
Jeu de données de référence par défaut.
L'insertion est idempotente : une entrée dont la désignation française
existe déjà est ignorée.
"""

import logging

from sqlalchemy.orm import Session

from procurement.audit import Principal
from procurement.schemas.reference import AcronymCreate, ConsultationStepCreate, DesignationCreate
from procurement.services.reference import (
    ApprovalStatusService, AwardMethodService, BudgetTypeService, ConsultationPhaseService,
    ConsultationStepService, EconomicNatureService, ExclusionTypeService, RealizationDirectorService,
    RealizationNatureService, RealizationStatusService,
)

logger = logging.getLogger(__name__)

AWARD_METHODS = [
    ("AOO", "Appel d'offres ouvert"),
    ("AOR", "Appel d'offres restreint"),
    ("CC", "Concours"),
    ("GRE", "Gré à gré simple"),
    ("GREAC", "Gré à gré après consultation"),
    ("CP", "Consultation des prix"),
]

ECONOMIC_NATURES = [
    ("EPIC", "Établissement public à caractère industriel et commercial"),
    ("SPA", "Société par actions"),
    ("SARL", "Société à responsabilité limitée"),
    ("EURL", "Entreprise unipersonnelle à responsabilité limitée"),
    ("SNC", "Société en nom collectif"),
    ("COOP", "Coopérative"),
]

# (phase, étapes)
PHASES = [
    ("Préparation du dossier", ["Rédaction du cahier des charges", "Validation du cahier des charges"]),
    ("Publication de l'avis", ["Transmission de l'avis"]),
    ("Dépôt des offres", ["Réception des plis"]),
    ("Ouverture des plis", ["Contrôle des plis"]),
    ("Évaluation des offres", ["Analyse des offres", "Décision de la commission"]),
    ("Attribution provisoire", []),
    ("Signature du contrat", ["Classement du dossier"]),
]

APPROVAL_STATUSES = ["En attente", "Approuvé", "Refusé", "Brouillon"]
REALIZATION_STATUSES = ["Planification", "En cours de réalisation", "Terminé", "Suspendu", "Annulé"]
REALIZATION_NATURES = ["Travaux de construction", "Fournitures informatiques", "Prestation de services", "Études"]
REALIZATION_DIRECTORS = ["Direction technique", "Direction des projets", "Direction administrative"]
BUDGET_TYPES = ["Budget d'investissement", "Budget de fonctionnement", "Budget de maintenance"]
EXCLUSION_TYPES = ["Exclusion fiscale", "Faillite", "Condamnation pénale", "Défaut de qualification"]


def _seed_designations(service, labels, principal: Principal) -> int:
    created = 0
    for label in labels:
        if service.find_by_designation_fr(label):
            continue
        service.create(DesignationCreate(designation_fr=label), principal)
        created += 1
    return created


def _seed_acronyms(service, entries, principal: Principal) -> int:
    created = 0
    for acronym, label in entries:
        if service.find_by_designation_fr(label) or service.find_by_acronym_fr(acronym):
            continue
        service.create(AcronymCreate(acronym_fr=acronym, designation_fr=label), principal)
        created += 1
    return created


def seed_reference_data(db: Session, principal: Principal) -> dict:
    """Insère les données manquantes et retourne le nombre de créations par entité"""
    results = {
        "award_methods": _seed_acronyms(AwardMethodService(db), AWARD_METHODS, principal),
        "economic_natures": _seed_acronyms(EconomicNatureService(db), ECONOMIC_NATURES, principal),
        "consultation_phases": 0,
        "consultation_steps": 0,
    }

    phases = ConsultationPhaseService(db)
    steps = ConsultationStepService(db)
    for phase_label, step_labels in PHASES:
        phase = phases.find_by_designation_fr(phase_label)
        if not phase:
            phase = phases.create(DesignationCreate(designation_fr=phase_label), principal)
            results["consultation_phases"] += 1
        for step_label in step_labels:
            if steps.find_by_designation_fr(step_label):
                continue
            steps.create(ConsultationStepCreate(designation_fr=step_label, consultation_phase_id=phase.id), principal)
            results["consultation_steps"] += 1

    results["approval_statuses"] = _seed_designations(ApprovalStatusService(db), APPROVAL_STATUSES, principal)
    results["realization_statuses"] = _seed_designations(RealizationStatusService(db), REALIZATION_STATUSES, principal)
    results["realization_natures"] = _seed_designations(RealizationNatureService(db), REALIZATION_NATURES, principal)
    results["realization_directors"] = _seed_designations(
        RealizationDirectorService(db), REALIZATION_DIRECTORS, principal
    )
    results["budget_types"] = _seed_designations(BudgetTypeService(db), BUDGET_TYPES, principal)
    results["exclusion_types"] = _seed_designations(ExclusionTypeService(db), EXCLUSION_TYPES, principal)

    logger.info(f"🌱 Données de référence: {sum(results.values())} entrée(s) créée(s)")
    return results
