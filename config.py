"""Configuration management for the Planmoni backend"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalServiceConfig:
    """Credentials and base URLs for the third-party collaborators.

    Passed explicitly to whatever component talks to a provider; the fee,
    KYC tier and plan progress calculations never read it.
    """

    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    paystack_secret_key: Optional[str]
    dojah_app_id: Optional[str]
    dojah_secret_key: Optional[str]
    mono_secret_key: Optional[str]

    def configured(self) -> dict:
        """Report which collaborators have credentials, without the values"""
        return {
            "supabase": bool(self.supabase_url and self.supabase_anon_key),
            "paystack": bool(self.paystack_secret_key),
            "dojah": bool(self.dojah_app_id and self.dojah_secret_key),
            "mono": bool(self.mono_secret_key),
        }


class Config:
    """Application configuration"""

    # Environment detection
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower().strip()
    IS_PRODUCTION = ENVIRONMENT in ("production", "prod")

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///planmoni.db")
    DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    # Currency
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "NGN")
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₦")

    # Feature flags
    EMERGENCY_WITHDRAWAL_ENABLED = (
        os.getenv("EMERGENCY_WITHDRAWAL_ENABLED", "true").lower() == "true"
    )  # False = emergency withdrawal route answers 503

    # Bearer sessions issued to the mobile app
    SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Collaborators (Supabase data/auth, Paystack payments, Dojah KYC, Mono linking)
    SUPABASE_URL = os.getenv("SUPABASE_URL", os.getenv("EXPO_PUBLIC_SUPABASE_URL"))
    SUPABASE_ANON_KEY = os.getenv(
        "SUPABASE_ANON_KEY", os.getenv("EXPO_PUBLIC_SUPABASE_ANON_KEY")
    )
    PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY")
    DOJAH_APP_ID = os.getenv("DOJAH_APP_ID")
    DOJAH_SECRET_KEY = os.getenv("DOJAH_SECRET_KEY")
    MONO_SECRET_KEY = os.getenv("MONO_SECRET_KEY")

    @classmethod
    def external_services(cls) -> ExternalServiceConfig:
        """Snapshot collaborator settings into an injectable value"""
        return ExternalServiceConfig(
            supabase_url=cls.SUPABASE_URL,
            supabase_anon_key=cls.SUPABASE_ANON_KEY,
            paystack_secret_key=cls.PAYSTACK_SECRET_KEY,
            dojah_app_id=cls.DOJAH_APP_ID,
            dojah_secret_key=cls.DOJAH_SECRET_KEY,
            mono_secret_key=cls.MONO_SECRET_KEY,
        )

    @staticmethod
    def log_environment_config():
        """Log current environment configuration for debugging"""
        logger.info("🔧 Planmoni Environment Configuration:")
        logger.info(f"   Environment: {Config.ENVIRONMENT.upper()}")
        logger.info(f"   Is Production: {Config.IS_PRODUCTION}")
        logger.info(f"   Currency: {Config.DEFAULT_CURRENCY} ({Config.CURRENCY_SYMBOL})")
        logger.info(
            f"   Emergency Withdrawal: {'enabled' if Config.EMERGENCY_WITHDRAWAL_ENABLED else 'disabled'}"
        )

        if Config.DATABASE_URL.startswith("sqlite"):
            if Config.IS_PRODUCTION:
                logger.warning("   ⚠️  Database: SQLite in production")
            else:
                logger.info("   💻 Database: SQLite (local)")
        else:
            # Never log credentials embedded in the URL
            logger.info(f"   🚀 Database: {Config.DATABASE_URL.split('://', 1)[0]}")

        for name, ready in Config.external_services().configured().items():
            if ready:
                logger.info(f"   ✅ {name}: configured")
            else:
                logger.warning(f"   ⚠️  {name}: not configured")
