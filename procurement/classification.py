"""
Classification des libellés de référence.

Les catégories métier (type de phase, type de directeur, catégorie
d'exclusion...) sont déduites des libellés français par recherche de
mots-clés. Chaque classification est une fonction pure pilotée par une
table de règles ordonnée : la première règle dont un mot-clé apparaît dans
le libellé (en minuscules) l'emporte.
"""

UNKNOWN = "UNKNOWN"
OTHER = "OTHER"

# (préfixe d'acronyme, catégorie)
AWARD_METHOD_RULES = (
    ("AO", "APPEL_OFFRES"),
    ("CC", "CONCOURS"),
    ("GRE", "MARCHE_NEGOCIE"),
    ("CP", "CONSULTATION_PRIX"),
    ("DU", "DEMANDE_UNIQUE"),
    ("AC", "ACCORD_CADRE"),
)

# (catégorie, mots-clés)
PHASE_RULES = (
    ("PREPARATION", ("préparation", "preparation")),
    ("PUBLICATION", ("publication", "annonce")),
    ("SUBMISSION", ("soumission", "dépôt")),
    ("OPENING", ("ouverture", "dépouillement")),
    ("EVALUATION", ("évaluation", "analyse")),
    ("ADJUDICATION", ("adjudication", "attribution")),
    ("NOTIFICATION", ("notification", "information")),
    ("APPEAL", ("recours", "contestation")),
    ("CONTRACT_SIGNATURE", ("signature", "contrat")),
)

PHASE_ORDER = {
    "PREPARATION": 1,
    "PUBLICATION": 2,
    "SUBMISSION": 3,
    "OPENING": 4,
    "EVALUATION": 5,
    "ADJUDICATION": 6,
    "NOTIFICATION": 7,
    "APPEAL": 8,
    "CONTRACT_SIGNATURE": 9,
}

PRE_AWARD_PHASES = frozenset({"PREPARATION", "PUBLICATION", "SUBMISSION", "OPENING", "EVALUATION"})
POST_AWARD_PHASES = frozenset({"ADJUDICATION", "NOTIFICATION", "CONTRACT_SIGNATURE"})

STEP_RULES = (
    ("DRAFTING", ("rédaction", "élaboration")),
    ("VALIDATION", ("validation", "approbation")),
    ("VERIFICATION", ("vérification", "contrôle")),
    ("TRANSMISSION", ("transmission", "envoi")),
    ("RECEPTION", ("réception", "accusé")),
    ("ANALYSIS", ("analyse", "examen")),
    ("DECISION", ("décision", "choix")),
    ("ARCHIVING", ("archive", "classement")),
)

APPROVAL_STATUS_RULES = (
    ("APPROVED", ("approuvé", "approved", "accepté", "validé")),
    ("REJECTED", ("refusé", "rejected", "rejeté", "declined")),
    ("PENDING", ("en attente", "pending", "en cours", "processing")),
    ("DRAFT", ("brouillon", "draft", "temporaire")),
    ("SUSPENDED", ("suspendu", "suspended", "gelé")),
    ("CANCELLED", ("annulé", "cancelled", "canceled")),
    ("UNDER_REVIEW", ("révision", "review", "vérification")),
)

REALIZATION_STATUS_RULES = (
    ("PLANNING", ("initial", "planification", "préparation", "conception")),
    ("IN_PROGRESS", ("en cours", "actif", "exécution", "réalisation")),
    ("COMPLETED", ("terminé", "achevé", "complété", "finalisé")),
    ("SUSPENDED", ("suspendu", "en pause", "interrompu", "gelé")),
    ("CANCELLED", ("annulé", "abandonné", "arrêté", "supprimé")),
    ("UNDER_REVIEW", ("révision", "validation", "vérification", "contrôle")),
    ("APPROVED", ("approuvé", "validé", "accepté", "autorisé")),
    ("REJECTED", ("rejeté", "refusé", "non approuvé", "declined")),
    ("ON_HOLD", ("en attente", "standby", "différé", "reporté")),
)

REALIZATION_NATURE_RULES = (
    ("INFRASTRUCTURE", ("infrastructure", "construction", "bâtiment", "ouvrage")),
    ("TECHNOLOGY", ("technologie", "informatique", "numérique", "digital")),
    ("SERVICES", ("service", "prestation", "conseil", "consultation")),
    ("MANUFACTURING", ("fabrication", "production", "manufacturier", "industriel")),
    ("RESEARCH_DEVELOPMENT", ("recherche", "développement", "innovation", "r&d")),
    ("ENERGY_UTILITIES", ("énergie", "électrique", "hydraulique", "utilities")),
    ("ENVIRONMENTAL", ("environnement", "écologique", "durable", "vert")),
    ("COMMERCIAL", ("commercial", "affaires", "business", "marché")),
    ("EDUCATION", ("éducation", "formation", "enseignement", "pédagogique")),
    ("HEALTH_MEDICAL", ("santé", "médical", "hospitalier", "thérapeutique")),
    ("TRANSPORTATION", ("transport", "logistique", "mobilité", "circulation")),
    ("AGRICULTURAL", ("agricole", "rural", "agronomique", "cultivation")),
)

DIRECTOR_RULES = (
    ("EXECUTIVE_DIRECTOR", ("directeur général", "dg", "ceo", "président")),
    ("TECHNICAL_DIRECTOR", ("technique", "technical", "ingénieur", "engineer")),
    ("PROJECT_DIRECTOR", ("projet", "project", "programme", "program")),
    ("OPERATIONS_DIRECTOR", ("opération", "operations", "exploitation", "production")),
    ("FINANCIAL_DIRECTOR", ("financier", "financial", "comptable", "finance")),
    ("COMMERCIAL_DIRECTOR", ("commercial", "vente", "sales", "marketing")),
    ("HR_DIRECTOR", ("ressources humaines", "rh", "human resources", "hr")),
    ("QUALITY_DIRECTOR", ("qualité", "quality", "qhse", "assurance")),
    ("REGIONAL_DIRECTOR", ("régional", "regional", "zone", "territorial")),
    ("ADMINISTRATIVE_DIRECTOR", ("administratif", "administrative", "administration", "admin")),
)

BUDGET_RULES = (
    ("INVESTMENT_BUDGET", ("investissement", "investment", "capital", "équipement", "equipment", "استثمار", "رأسمالي")),
    ("OPERATING_BUDGET", ("fonctionnement", "operating", "operational", "exploitation", "تشغيلي", "تشغيل")),
    ("PERSONNEL_BUDGET", ("personnel", "salaire", "salary", "wages", "رواتب", "أجور")),
    ("MAINTENANCE_BUDGET", ("maintenance", "entretien", "réparation", "repair", "صيانة", "إصلاح")),
    ("RESEARCH_DEVELOPMENT_BUDGET", ("recherche", "research", "développement", "development", "innovation", "بحث", "تطوير")),
    ("DEFENSE_BUDGET", ("défense", "defense", "militaire", "military", "sécurité", "security", "دفاع", "عسكري")),
    ("TRAINING_BUDGET", ("formation", "training", "éducation", "education", "تدريب", "تعليم")),
    ("EMERGENCY_BUDGET", ("urgence", "emergency", "contingence", "contingency", "طوارئ", "احتياطي")),
)

EXCLUSION_RULES = (
    ("LEGAL_EXCLUSION", ("judiciaire", "juridique", "tribunal")),
    ("BANKRUPTCY_EXCLUSION", ("faillite", "insolvabilité", "liquidation")),
    ("CRIMINAL_EXCLUSION", ("criminel", "pénal", "condamnation")),
    ("FINANCIAL_EXCLUSION", ("financier", "crédit", "endettement")),
    ("TAX_EXCLUSION", ("fiscal", "impôt", "taxe")),
    ("ADMINISTRATIVE_EXCLUSION", ("administratif", "réglementaire")),
    ("LICENSE_EXCLUSION", ("licence", "autorisation", "agrément")),
    ("SECTORAL_EXCLUSION", ("sectoriel", "activité", "domaine")),
    ("GEOGRAPHICAL_EXCLUSION", ("géographique", "territorial", "région")),
    ("TEMPORAL_EXCLUSION", ("temporaire", "période", "durée")),
    ("QUALIFICATION_EXCLUSION", ("qualification", "compétence", "expérience")),
    ("SECURITY_EXCLUSION", ("sécurité", "secret", "confidentiel")),
    ("CONFLICT_EXCLUSION", ("conflit", "intérêt", "incompatibilité")),
)

# (catégorie, acronymes exacts, mots-clés de désignation)
ECONOMIC_NATURE_RULES = (
    ("PUBLIC_SECTOR", (), ("public", "état", "administration")),
    ("PUBLIC_ESTABLISHMENT", ("epa", "epic"), ("établissement public",)),
    ("PRIVATE_SECTOR", (), ("privé", "particulier")),
    ("LIMITED_LIABILITY_COMPANY", ("sarl",), ("société à responsabilité limitée",)),
    ("JOINT_STOCK_COMPANY", ("spa",), ("société par actions",)),
    ("SINGLE_MEMBER_COMPANY", ("eurl",), ("entreprise unipersonnelle",)),
    ("GENERAL_PARTNERSHIP", ("snc",), ("société en nom collectif",)),
    ("LIMITED_PARTNERSHIP", ("scs",), ("société en commandite",)),
    ("MIXED_ECONOMY", (), ("mixte", "économie mixte")),
    ("COOPERATIVE", ("scoop", "coop"), ("coopératif", "coopérative")),
    ("INDIVIDUAL_ENTERPRISE", (), ("individuel", "personnel")),
    ("NON_PROFIT", (), ("association", "ong", "but non lucratif")),
    ("FOREIGN_ENTITY", (), ("étranger", "international", "multinational")),
)

PROVIDER_TYPES = {
    "PUBLIC_SECTOR": "PUBLIC_PROVIDER",
    "PUBLIC_ESTABLISHMENT": "PUBLIC_PROVIDER",
    "PRIVATE_SECTOR": "PRIVATE_PROVIDER",
    "LIMITED_LIABILITY_COMPANY": "PRIVATE_PROVIDER",
    "JOINT_STOCK_COMPANY": "PRIVATE_PROVIDER",
    "MIXED_ECONOMY": "MIXED_PROVIDER",
    "COOPERATIVE": "COOPERATIVE_PROVIDER",
    "INDIVIDUAL_ENTERPRISE": "INDIVIDUAL_PROVIDER",
    "FOREIGN_ENTITY": "FOREIGN_PROVIDER",
    "NON_PROFIT": "NON_PROFIT_PROVIDER",
}

# Seuils de capital en DZD, du plus grand au plus petit
BUSINESS_SIZE_THRESHOLDS = (
    (1_000_000_000, "LARGE_ENTERPRISE"),
    (100_000_000, "MEDIUM_ENTERPRISE"),
    (10_000_000, "SMALL_ENTERPRISE"),
)


def _match(label: str | None, rules, default: str, missing: str = UNKNOWN) -> str:
    if label is None:
        return missing
    text = label.lower()
    for category, keywords in rules:
        if any(keyword in text for keyword in keywords):
            return category
    return default


def award_method_category(acronym_fr: str | None) -> str:
    """Catégorie d'un mode de passation d'après le préfixe de son acronyme français"""
    if acronym_fr is None:
        return UNKNOWN
    acronym = acronym_fr.upper()
    for prefix, category in AWARD_METHOD_RULES:
        if acronym.startswith(prefix):
            return category
    return OTHER


def consultation_phase_type(designation_fr: str | None) -> str:
    return _match(designation_fr, PHASE_RULES, OTHER)


def phase_order(phase_type: str) -> int:
    """Rang d'une phase dans le cycle de la consultation (999 pour les autres)"""
    return PHASE_ORDER.get(phase_type, 999)


def is_pre_award_phase(designation_fr: str | None) -> bool:
    return consultation_phase_type(designation_fr) in PRE_AWARD_PHASES


def is_post_award_phase(designation_fr: str | None) -> bool:
    return consultation_phase_type(designation_fr) in POST_AWARD_PHASES


def consultation_step_type(designation_fr: str | None) -> str:
    return _match(designation_fr, STEP_RULES, OTHER)


def approval_status_type(designation_fr: str | None) -> str:
    return _match(designation_fr, APPROVAL_STATUS_RULES, OTHER)


def realization_status_category(designation_fr: str | None) -> str:
    return _match(designation_fr, REALIZATION_STATUS_RULES, "ACTIVE")


def realization_nature_category(designation_fr: str | None) -> str:
    return _match(designation_fr, REALIZATION_NATURE_RULES, "GENERAL")


def director_type(designation_fr: str | None) -> str:
    return _match(designation_fr, DIRECTOR_RULES, "GENERAL_DIRECTOR")


def budget_category(designation_fr: str | None) -> str:
    return _match(designation_fr, BUDGET_RULES, "GENERAL_BUDGET")


def exclusion_category(designation_fr: str | None) -> str:
    return _match(designation_fr, EXCLUSION_RULES, OTHER, missing=OTHER)


def economic_nature_type(designation_fr: str | None, acronym_fr: str | None = None) -> str:
    """Type de nature économique : l'acronyme exact ou un mot-clé de la désignation"""
    if designation_fr is None and acronym_fr is None:
        return OTHER
    designation = (designation_fr or "").lower()
    acronym = (acronym_fr or "").lower()
    for category, acronyms, keywords in ECONOMIC_NATURE_RULES:
        if acronym in acronyms or any(keyword in designation for keyword in keywords):
            return category
    return OTHER


def provider_type(nature_type: str | None) -> str:
    if nature_type is None:
        return "UNKNOWN_PROVIDER"
    return PROVIDER_TYPES.get(nature_type, "OTHER_PROVIDER")


def business_size_category(capital: float | None) -> str:
    """Taille d'entreprise d'après le capital social"""
    if capital is None or capital <= 0:
        return "UNSPECIFIED"
    for threshold, category in BUSINESS_SIZE_THRESHOLDS:
        if capital >= threshold:
            return category
    return "MICRO_ENTERPRISE"
