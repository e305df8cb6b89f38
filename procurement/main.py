"""
Gestion des Consultations - Point d'entrée FastAPI.
Suivi des consultations (appels d'offres), des soumissions et du registre des fournisseurs.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from procurement.config import get_settings
from procurement.database import engine, init_db
from procurement.exceptions import ProcurementError
from procurement.routers import consultations, files, providers, reference, submissions
from procurement.scheduler.jobs import init_scheduler, scheduler, shutdown_scheduler

settings = get_settings()

# Configuration du logging
_handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    _handlers.append(logging.FileHandler(settings.LOG_FILE, mode="a", encoding="utf-8"))

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=_handlers,
)

logger = logging.getLogger(__name__)


# === Lifespan : startup + shutdown ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestion du cycle de vie de l'application"""
    # --- STARTUP ---
    logger.info(f"🚀 Démarrage de {settings.APP_NAME}")
    logger.info(f"   Version: {settings.APP_VERSION}")
    logger.info(f"   Debug: {settings.DEBUG}")

    init_db()
    logger.info("✅ Base de données initialisée")

    if settings.SCHEDULER_ENABLED:
        init_scheduler()
        logger.info("✅ Scheduler initialisé")
    else:
        logger.info("⏸️ Scheduler désactivé (SCHEDULER_ENABLED=false)")

    logger.info("🟢 Application prête")

    yield

    # --- SHUTDOWN ---
    logger.info("🔴 Arrêt de l'application...")
    shutdown_scheduler()
    logger.info("👋 Application arrêtée proprement")


# === Création de l'application FastAPI ===
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## 📋 Gestion des Consultations

Suivi des marchés publics, de la préparation du dossier jusqu'au dépôt des offres.

### Fonctionnalités :
- **Données de référence** : modes de passation, phases et étapes, statuts, natures, directions, budgets
- **Consultations** : création contrôlée, référence automatique, statistiques annuelles
- **Soumissions** : dépôt des offres avant la date limite, plis administratif / technique / financier
- **Fournisseurs** : registre, représentants légaux, habilitations
- **Scheduler** : revue quotidienne des échéances

### En-tête :
- `X-User` : utilisateur à l'origine des modifications (audit)
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# === Middleware CORS ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Gestion globale des erreurs ===
@app.exception_handler(ProcurementError)
async def procurement_exception_handler(request: Request, exc: ProcurementError):
    """Erreurs métier : statut et code portés par l'exception"""
    logger.warning(f"⚠️ {exc.error_code} sur {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """Contrainte d'unicité violée en base"""
    logger.warning(f"⚠️ Contrainte d'intégrité sur {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={
            "detail": "Conflit avec une donnée existante",
            "error_code": "DUPLICATE_RESOURCE",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handler global pour les erreurs non gérées"""
    logger.error(f"❌ Erreur non gérée: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Erreur interne du serveur",
            "error": str(exc) if settings.DEBUG else "Contactez l'administrateur",
        },
    )


# === Enregistrement des routers ===
for reference_router in reference.routers:
    app.include_router(reference_router, prefix="/api/v1")
app.include_router(consultations.router, prefix="/api/v1")
app.include_router(submissions.router, prefix="/api/v1")
app.include_router(providers.router, prefix="/api/v1")
app.include_router(providers.representators_router, prefix="/api/v1")
app.include_router(providers.clearances_router, prefix="/api/v1")
app.include_router(files.router, prefix="/api/v1")


# === Endpoints utilitaires ===
@app.get("/", tags=["Root"])
def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "status": "running",
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Health check pour Docker et monitoring"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.error(f"❌ Health check DB: {e}")
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy",
        "database": db_status,
        "version": settings.APP_VERSION,
    }


@app.get("/scheduler/status", tags=["Scheduler"])
def scheduler_status():
    """Vérifie le statut du scheduler"""
    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None,
        })

    return {
        "enabled": settings.SCHEDULER_ENABLED,
        "running": scheduler.running,
        "jobs": jobs,
    }
