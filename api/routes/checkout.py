"""
Checkout routes.

Builds a gateway helper from the posted order intent and returns the form (or
redirect parameters) the storefront should present to the customer.
"""

import structlog
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from api import schemas
from core.dependencies import get_settings
from core.settings import Settings
from integrations import INTEGRATIONS, payment_service_for
from integrations.errors import ConfigurationError

router = APIRouter()
log = structlog.get_logger(__name__)


@router.get("", response_model=list[str])
async def list_services():
    """List the registered payment services."""
    return sorted(INTEGRATIONS)


@router.post(
    "/{service}",
    response_model=schemas.CheckoutForm,
    responses={422: {"model": schemas.ErrorOut}, 502: {"model": schemas.ErrorOut}},
)
async def create_checkout(
    service: str,
    request: schemas.CheckoutRequest,
    settings: Settings = Depends(get_settings),
):
    """Map the order onto `service`'s wire fields and return the checkout form."""
    helper = payment_service_for(
        request.order, request.account, service, request.options, settings=settings
    )
    for key, value in request.fields.items():
        helper.apply(key, value)

    if request.line_items:
        if "line_item" not in helper.operations:
            raise ConfigurationError(
                f"{helper.gateway} does not accept line items",
                field="line_items",
                gateway=helper.gateway,
            )
        for item in request.line_items:
            helper.line_item(item)

    # PxPay blocks on a gateway round trip
    fields = await run_in_threadpool(helper.form_fields)
    return schemas.CheckoutForm(
        service=helper.gateway,
        service_url=helper.service_url(),
        method=helper.form_method(),
        fields=fields,
    )
