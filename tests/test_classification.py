"""Unit tests for label classification rule tables."""

import pytest

from procurement.classification import (
    approval_status_type, award_method_category, budget_category, business_size_category,
    consultation_phase_type, consultation_step_type, director_type, economic_nature_type,
    exclusion_category, is_post_award_phase, is_pre_award_phase, phase_order, provider_type,
    realization_nature_category, realization_status_category,
)


class TestAwardMethodCategory:
    """Prefix rules on the French acronym."""

    @pytest.mark.parametrize(
        "acronym, expected",
        [
            ("AOO", "APPEL_OFFRES"),
            ("aor", "APPEL_OFFRES"),
            ("CC", "CONCOURS"),
            ("GRE", "MARCHE_NEGOCIE"),
            ("GREAC", "MARCHE_NEGOCIE"),
            ("CP", "CONSULTATION_PRIX"),
            ("DU", "DEMANDE_UNIQUE"),
            ("AC", "ACCORD_CADRE"),
            ("XYZ", "OTHER"),
            (None, "UNKNOWN"),
        ],
    )
    def test_prefixes(self, acronym, expected) -> None:
        assert award_method_category(acronym) == expected


class TestConsultationPhase:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Préparation du dossier", "PREPARATION"),
            ("Publication de l'avis", "PUBLICATION"),
            ("Dépôt des offres", "SUBMISSION"),
            ("Ouverture des plis", "OPENING"),
            ("Évaluation des offres", "EVALUATION"),
            ("Attribution provisoire", "ADJUDICATION"),
            ("Notification des résultats", "NOTIFICATION"),
            ("Recours", "APPEAL"),
            ("Signature du contrat", "CONTRACT_SIGNATURE"),
            ("Divers", "OTHER"),
            (None, "UNKNOWN"),
        ],
    )
    def test_phase_type(self, label, expected) -> None:
        assert consultation_phase_type(label) == expected

    def test_phase_order(self) -> None:
        assert phase_order("PREPARATION") == 1
        assert phase_order("CONTRACT_SIGNATURE") == 9
        assert phase_order("OTHER") == 999

    def test_pre_and_post_award(self) -> None:
        assert is_pre_award_phase("Ouverture des plis") is True
        assert is_post_award_phase("Ouverture des plis") is False
        assert is_post_award_phase("Signature du contrat") is True
        assert is_pre_award_phase("Recours") is False
        assert is_post_award_phase("Recours") is False


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Rédaction du cahier des charges", "DRAFTING"),
        ("Validation du dossier", "VALIDATION"),
        ("Contrôle des plis", "VERIFICATION"),
        ("Envoi de l'avis", "TRANSMISSION"),
        ("Réception des plis", "RECEPTION"),
        ("Examen des offres", "ANALYSIS"),
        ("Décision de la commission", "DECISION"),
        ("Classement du dossier", "ARCHIVING"),
        ("Autre étape", "OTHER"),
        (None, "UNKNOWN"),
    ],
)
def test_consultation_step_type(label, expected) -> None:
    assert consultation_step_type(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Approuvé", "APPROVED"),
        ("Refusé", "REJECTED"),
        ("En attente", "PENDING"),
        ("Brouillon", "DRAFT"),
        ("Suspendu", "SUSPENDED"),
        ("Annulé", "CANCELLED"),
        ("En révision", "UNDER_REVIEW"),
        ("Inconnu", "OTHER"),
        (None, "UNKNOWN"),
    ],
)
def test_approval_status_type(label, expected) -> None:
    assert approval_status_type(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Planification", "PLANNING"),
        ("En cours de réalisation", "IN_PROGRESS"),
        ("Terminé", "COMPLETED"),
        ("Interrompu", "SUSPENDED"),
        ("Abandonné", "CANCELLED"),
        ("Contrôle final", "UNDER_REVIEW"),
        ("Autorisé", "APPROVED"),
        ("Rejeté", "REJECTED"),
        ("Reporté", "ON_HOLD"),
        ("Sans libellé connu", "ACTIVE"),
        (None, "UNKNOWN"),
    ],
)
def test_realization_status_category(label, expected) -> None:
    assert realization_status_category(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Travaux de construction", "INFRASTRUCTURE"),
        ("Fournitures informatiques", "TECHNOLOGY"),
        ("Prestation de services", "SERVICES"),
        ("Fabrication de pièces", "MANUFACTURING"),
        ("Recherche appliquée", "RESEARCH_DEVELOPMENT"),
        ("Réseau électrique", "ENERGY_UTILITIES"),
        ("Protection de l'environnement", "ENVIRONMENTAL"),
        ("Activité commerciale", "COMMERCIAL"),
        ("Formation des agents", "EDUCATION"),
        ("Matériel médical", "HEALTH_MEDICAL"),
        ("Logistique", "TRANSPORTATION"),
        ("Projet agricole", "AGRICULTURAL"),
        ("Études", "GENERAL"),
        (None, "UNKNOWN"),
    ],
)
def test_realization_nature_category(label, expected) -> None:
    assert realization_nature_category(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Directeur général", "EXECUTIVE_DIRECTOR"),
        ("Direction technique", "TECHNICAL_DIRECTOR"),
        ("Direction des projets", "PROJECT_DIRECTOR"),
        ("Direction de l'exploitation", "OPERATIONS_DIRECTOR"),
        ("Direction des finances", "FINANCIAL_DIRECTOR"),
        ("Direction des ventes", "COMMERCIAL_DIRECTOR"),
        ("Ressources humaines", "HR_DIRECTOR"),
        ("Qualité", "QUALITY_DIRECTOR"),
        ("Direction régionale", "REGIONAL_DIRECTOR"),
        ("Direction administrative", "ADMINISTRATIVE_DIRECTOR"),
        ("Cabinet", "GENERAL_DIRECTOR"),
        (None, "UNKNOWN"),
    ],
)
def test_director_type(label, expected) -> None:
    assert director_type(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Budget d'investissement", "INVESTMENT_BUDGET"),
        ("Budget de fonctionnement", "OPERATING_BUDGET"),
        ("Budget du personnel", "PERSONNEL_BUDGET"),
        ("Budget de maintenance", "MAINTENANCE_BUDGET"),
        ("Budget recherche", "RESEARCH_DEVELOPMENT_BUDGET"),
        ("Budget militaire", "DEFENSE_BUDGET"),
        ("Budget formation", "TRAINING_BUDGET"),
        ("Fonds d'urgence", "EMERGENCY_BUDGET"),
        ("ميزانية استثمار", "INVESTMENT_BUDGET"),
        ("Budget spécial", "GENERAL_BUDGET"),
        (None, "UNKNOWN"),
    ],
)
def test_budget_category(label, expected) -> None:
    assert budget_category(label) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Décision judiciaire", "LEGAL_EXCLUSION"),
        ("Faillite", "BANKRUPTCY_EXCLUSION"),
        ("Condamnation", "CRIMINAL_EXCLUSION"),
        ("Endettement", "FINANCIAL_EXCLUSION"),
        ("Exclusion fiscale", "TAX_EXCLUSION"),
        ("Manquement réglementaire", "ADMINISTRATIVE_EXCLUSION"),
        ("Retrait d'agrément", "LICENSE_EXCLUSION"),
        ("Exclusion sectorielle", "SECTORAL_EXCLUSION"),
        ("Exclusion géographique", "GEOGRAPHICAL_EXCLUSION"),
        ("Exclusion temporaire", "TEMPORAL_EXCLUSION"),
        ("Défaut de qualification", "QUALIFICATION_EXCLUSION"),
        ("Secret défense", "SECURITY_EXCLUSION"),
        ("Conflit d'intérêt", "CONFLICT_EXCLUSION"),
        ("Divers", "OTHER"),
        (None, "OTHER"),
    ],
)
def test_exclusion_category(label, expected) -> None:
    assert exclusion_category(label) == expected


class TestEconomicNature:
    @pytest.mark.parametrize(
        "designation, acronym, expected",
        [
            ("Secteur public", None, "PUBLIC_SECTOR"),
            ("Établissement industriel", "EPIC", "PUBLIC_ESTABLISHMENT"),
            ("Secteur privé", None, "PRIVATE_SECTOR"),
            ("Société à responsabilité limitée", "SARL", "LIMITED_LIABILITY_COMPANY"),
            ("Société par actions", "SPA", "JOINT_STOCK_COMPANY"),
            ("Entreprise unipersonnelle", None, "SINGLE_MEMBER_COMPANY"),
            ("Société en nom collectif", "SNC", "GENERAL_PARTNERSHIP"),
            ("Société en commandite simple", "SCS", "LIMITED_PARTNERSHIP"),
            ("Économie mixte", None, "MIXED_ECONOMY"),
            ("Coopérative agricole", None, "COOPERATIVE"),
            ("Entrepreneur individuel", None, "INDIVIDUAL_ENTERPRISE"),
            ("Association caritative", None, "NON_PROFIT"),
            ("Groupe multinational", None, "FOREIGN_ENTITY"),
            ("Autre forme", "XYZ", "OTHER"),
            (None, None, "OTHER"),
        ],
    )
    def test_nature_type(self, designation, acronym, expected) -> None:
        assert economic_nature_type(designation, acronym) == expected

    def test_acronym_alone_is_enough(self) -> None:
        assert economic_nature_type(None, "spa") == "JOINT_STOCK_COMPANY"


class TestProvider:
    @pytest.mark.parametrize(
        "nature, expected",
        [
            ("PUBLIC_SECTOR", "PUBLIC_PROVIDER"),
            ("LIMITED_LIABILITY_COMPANY", "PRIVATE_PROVIDER"),
            ("MIXED_ECONOMY", "MIXED_PROVIDER"),
            ("COOPERATIVE", "COOPERATIVE_PROVIDER"),
            ("INDIVIDUAL_ENTERPRISE", "INDIVIDUAL_PROVIDER"),
            ("FOREIGN_ENTITY", "FOREIGN_PROVIDER"),
            ("NON_PROFIT", "NON_PROFIT_PROVIDER"),
            ("GENERAL_PARTNERSHIP", "OTHER_PROVIDER"),
            (None, "UNKNOWN_PROVIDER"),
        ],
    )
    def test_provider_type(self, nature, expected) -> None:
        assert provider_type(nature) == expected

    @pytest.mark.parametrize(
        "capital, expected",
        [
            (None, "UNSPECIFIED"),
            (0, "UNSPECIFIED"),
            (-5, "UNSPECIFIED"),
            (5_000_000, "MICRO_ENTERPRISE"),
            (10_000_000, "SMALL_ENTERPRISE"),
            (250_000_000, "MEDIUM_ENTERPRISE"),
            (1_000_000_000, "LARGE_ENTERPRISE"),
        ],
    )
    def test_business_size(self, capital, expected) -> None:
        assert business_size_category(capital) == expected
