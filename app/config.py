# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    secret_key: str
    app_env: str = "development"
    log_level: str = "INFO"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    reset_token_expire_minutes: int = 60
    sendgrid_api_key: str = ""
    mail_sender_email: str = "no-reply@example.com"
    mail_sender_name: str = "Zero Hunger Team"
    contact_inbox_email: str = ""
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create an instance of Settings to be imported across the application
settings = Settings()
