import os

from dotenv import load_dotenv
from fastapi import Request

load_dotenv()


class Settings:
    """
    Application settings read from environment variables.

    Values are resolved when the class body executes, so a `.env` file in the
    working directory is honoured as long as it exists before import.
    """

    # Document store
    MONGO_URL = os.getenv("MONGO_URL") or os.getenv("DATABASE_URL", "mongodb://localhost:27017")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "vismoh")

    # JWT settings
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-key-change")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # Generative AI
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    # Media host
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_ROOT_FOLDER = os.getenv("CLOUDINARY_ROOT_FOLDER", "VISMOH")
    UPLOAD_MAX_BYTES = int(os.getenv("UPLOAD_MAX_BYTES", str(10 * 1024 * 1024)))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    @classmethod
    def missing(cls):
        """Names of critical variables that are still unset."""
        required = {
            "JWT_SECRET": os.getenv("JWT_SECRET"),
            "GEMINI_API_KEY": cls.GEMINI_API_KEY,
            "CLOUDINARY_CLOUD_NAME": cls.CLOUDINARY_CLOUD_NAME,
            "CLOUDINARY_API_KEY": cls.CLOUDINARY_API_KEY,
            "CLOUDINARY_API_SECRET": cls.CLOUDINARY_API_SECRET,
        }
        return [name for name, value in required.items() if not value]


def get_settings(request: Request):
    return request.app.state.settings
