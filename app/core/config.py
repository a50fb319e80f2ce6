# app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "airtech-complaints")
    FIREBASE_SERVICE_ACCOUNT_PATH: str = os.getenv(
        "FIREBASE_SERVICE_ACCOUNT_PATH",
        "firebase-service-account.json",
    )

    # "firestore" for the real database, "memory" for local demos without Firebase
    DATABASE_BACKEND: str = os.getenv("DATABASE_BACKEND", "firestore").lower()

    # Serial complaint IDs, e.g. AIRTECH-01
    COMPLAINT_ID_PREFIX: str = os.getenv("COMPLAINT_ID_PREFIX", "AIRTECH")
    COMPLAINT_ID_MIN_DIGITS: int = int(os.getenv("COMPLAINT_ID_MIN_DIGITS", "2"))

    # When enabled, Closed and Cancelled complaints cannot be moved to another status
    ENFORCE_STATUS_TRANSITIONS: bool = os.getenv("ENFORCE_STATUS_TRANSITIONS", "false").lower() == "true"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Comma separated list, "*" allows everything
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


settings = Settings()
