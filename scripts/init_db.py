import sys
import os

# Ajouter le dossier parent au path pour importer 'procurement'
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from procurement.database import init_db
from procurement.config import get_settings

def main():
    print("🚀 Initialisation de la base de données...")
    settings = get_settings()
    if settings.DATABASE_URL:
        print("📡 Connexion via DATABASE_URL")
    else:
        print(f"📡 Connexion à : {settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}")

    try:
        init_db()
        print("✅ Base de données initialisée avec succès !")
    except Exception as e:
        print(f"❌ Erreur lors de l'initialisation : {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
