# backend/dialoom/routes/v1/admin_config.py
"""
Admin configuration routes, mounted under /api/admin/config.

    GET /pricing - Commission, VAT and add-on prices in effect
    PATCH /pricing - Override any of them at runtime
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_config_service, get_current_admin_user
from ...models.user import User
from ...schemas.pricing import PlatformPricingConfig, PlatformPricingConfigUpdate
from ...services.config_service import ConfigService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-config"])


@router.get("/pricing", response_model=PlatformPricingConfig)
async def get_pricing_config(
    current_user: User = Depends(get_current_admin_user),
    config_service: ConfigService = Depends(get_config_service),
) -> PlatformPricingConfig:
    config = await asyncio.to_thread(config_service.get_pricing_config)
    return PlatformPricingConfig(**config)


@router.patch("/pricing", response_model=PlatformPricingConfig)
async def update_pricing_config(
    payload: PlatformPricingConfigUpdate,
    current_user: User = Depends(get_current_admin_user),
    config_service: ConfigService = Depends(get_config_service),
) -> PlatformPricingConfig:
    """New prices apply to quotes and bookings from the next request on."""
    logger.info(f"Admin {current_user.id} updating platform pricing config")
    config = await asyncio.to_thread(
        config_service.set_pricing_config, payload.model_dump(exclude_unset=True)
    )
    return PlatformPricingConfig(**config)
