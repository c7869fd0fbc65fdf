from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str

    # JWT (cookie-based auth, one audience per realm)
    JWT_SECRET: str
    JWT_ISS: str = "nagoyameshi-api"
    MEMBER_JWT_AUD: str = "nagoyameshi-member"
    ADMIN_JWT_AUD: str = "nagoyameshi-admin"

    # Cookie
    COOKIE_DOMAIN: str | None = None
    COOKIE_SECURE: bool = True
    ACCESS_TOKEN_TTL_SECONDS: int = 60 * 60 * 2  # 2 hours

    BCRYPT_ROUNDS: int = 12

    # Billing (Stripe)
    STRIPE_SECRET: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    STRIPE_PREMIUM_PLAN_PRICE_ID: str = ""
    PREMIUM_PLAN_NAME: str = "premium_plan"
    PREMIUM_PLAN_MONTHLY_PRICE: int = 300

    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    def cors_origins(self) -> list[str]:
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x.strip()]


settings = Settings()
