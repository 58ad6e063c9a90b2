"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from typing import Optional
from fastapi import Header, HTTPException, Query, status

# Routers and tests must share one get_db for dependency overrides to apply
from database import get_db
from config import settings, schedule_config
from dosing import Language


async def get_language(
    lang: Optional[str] = Query(None, description="Label language (ko or en)"),
    accept_language: Optional[str] = Header(None, alias="Accept-Language")
) -> Language:
    """
    Resolve the label language for a request

    The `lang` query parameter wins over the Accept-Language header; anything
    unsupported falls back to the configured default.
    """
    if lang is not None:
        if lang not in schedule_config.SUPPORTED_LANGUAGES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported language: {lang}"
            )
        return Language(lang)

    if accept_language:
        primary = accept_language.split(",")[0].split("-")[0].strip().lower()
        if primary in schedule_config.SUPPORTED_LANGUAGES:
            return Language(primary)

    return Language.coerce(settings.DEFAULT_LANGUAGE)


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_medicine_service():
        from services.medicine_service import medicine_service
        return medicine_service

    @staticmethod
    def get_dose_record_service():
        from services.dose_record_service import dose_record_service
        return dose_record_service

    @staticmethod
    def get_schedule_service():
        from services.schedule_service import schedule_service
        return schedule_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service


# Service dependency instances
services = ServiceDependency()
