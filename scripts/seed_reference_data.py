import sys
import os

# Ajouter le dossier parent au path pour importer 'procurement'
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from procurement.audit import system_principal
from procurement.database import get_db_context, init_db
from procurement.seed import seed_reference_data

def main():
    print("🌱 Chargement des données de référence...")

    try:
        init_db()
        with get_db_context() as db:
            results = seed_reference_data(db, system_principal())
    except Exception as e:
        print(f"❌ Erreur lors du chargement : {e}")
        sys.exit(1)

    for entity, count in results.items():
        print(f"   📌 {entity}: {count} créé(s)")
    print("✅ Données de référence à jour !")

if __name__ == "__main__":
    main()
