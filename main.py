from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.domains.records.routes import router as record_router
from app.domains.entries.routes import router as entry_router
from app.domains.customers.routes import router as customer_router
from app.domains.voice.routes import router as voice_router
from app.domains.records.services import RecordService
from app.domains.customers.service import CustomerService
from app.domains.entries.service import EntryService
from app.domains.voice.service import VoiceService
from app.domains.migration.service import LocalMigrationService
from app.shared.legacy_cache import LegacyCache
from app.config.mongodb import RECORDS_COLLECTION, mongodb
from app.config.setting import settings
import logging
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)

app = FastAPI(title=settings.app_name)

logging.info(f"Allowed origins: {settings.parsed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.parsed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def register_services(app: FastAPI, db):
    record_service = RecordService(db)
    customer_service = CustomerService(db)
    app.state.record_service = record_service
    app.state.customer_service = customer_service
    app.state.entry_service = EntryService(record_service, customer_service)
    app.state.voice_service = VoiceService(customer_service)


@app.on_event("startup")
async def startup():
    # Initialize MongoDB connection
    try:
        await mongodb.init_db()
        await mongodb.ensure_indexes()
        count = await mongodb.db[RECORDS_COLLECTION].count_documents({})
        logging.info(f"MongoDB connected. Found {count} documents in 'dairy_records' collection.")
    except Exception as e:
        logging.error(f"MongoDB connection failed: {str(e)}")
        raise

    register_services(app, mongodb.db)

    # One-time move of browser-only data into the database
    migration = LocalMigrationService(
        LegacyCache(settings.legacy_cache_path),
        app.state.record_service,
        app.state.customer_service,
    )
    report = await migration.run()
    if report.message:
        logging.info(report.message)


@app.on_event("shutdown")
def shutdown_db():
    mongodb.close()


app.include_router(record_router, prefix="/api", tags=["Records"])
app.include_router(entry_router, prefix="/api", tags=["Entries"])
app.include_router(customer_router, prefix="/customers", tags=["Customers"])
app.include_router(voice_router, prefix="/voice", tags=["Voice"])
