# init_db.py
from database import init_db

if __name__ == "__main__":
    print("Création des tables...")
    init_db()
    print("✅ Base de données initialisée !")
    print("\n📊 Lancer l'API avec : uvicorn main:app --reload")
