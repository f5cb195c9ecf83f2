import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

import athletes
import auth
import chat
import connections
import dietary
import directory
import healthcare
import suggestions
import uploads
import verification
from ai_client import GeminiClient
from config import Settings
from database import connect
from errors import register_exception_handlers
from identity import MongoIdentityGateway
from media import CloudinaryMedia

logger = logging.getLogger(__name__)


def create_app(db=None, ai=None, media=None, identity=None, settings=None) -> FastAPI:
    """
    Build the API with its external clients.

    Anything not passed in is constructed once from `Settings`; handlers reach
    the clients through the providers in config, database, identity,
    ai_client and media.
    """
    settings = settings or Settings
    logging.basicConfig(level=settings.LOG_LEVEL)
    for name in settings.missing():
        logger.warning("Environment variable %s is not set", name)

    app = FastAPI(title="Vismoh API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.db = db if db is not None else connect(settings.MONGO_URL, settings.DATABASE_NAME)
    app.state.identity = identity or MongoIdentityGateway(app.state.db)
    app.state.ai = ai or GeminiClient(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)
    app.state.media = media or CloudinaryMedia(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        root_folder=settings.CLOUDINARY_ROOT_FOLDER,
    )

    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(athletes.router, prefix="/athlete", tags=["Performance"])
    app.include_router(healthcare.router, prefix="/healthcare", tags=["Healthcare"])
    app.include_router(dietary.router, prefix="/dietary", tags=["Dietary"])
    app.include_router(connections.router, prefix="/connect", tags=["Connections"])
    app.include_router(directory.router, prefix="/all", tags=["Directory"])
    app.include_router(suggestions.router, prefix="/suggestion", tags=["Suggestions"])
    app.include_router(verification.router, prefix="/verify", tags=["Verification"])
    app.include_router(uploads.router, prefix="/upload", tags=["Uploads"])
    app.include_router(chat.router, prefix="/chat", tags=["Chat"])

    @app.get("/")
    def root():
        return {"message": "Vismoh API running"}

    @app.get("/test")
    def test_database(request: Request):
        response = {
            "backend": "running",
            "database": "not available",
            "connection_status": "Not Connected",
            "collections": [],
        }
        try:
            response["collections"] = request.app.state.db.list_collection_names()[:10]
            response["database"] = "connected"
            response["connection_status"] = "Connected"
        except Exception as e:
            response["database"] = f"error: {str(e)[:80]}"
        return response

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
