from fastapi import APIRouter, Header, Query

from backend.app.core.messages import pick_locale
from backend.app.routers.schemas import ServiceOut
from backend.app.services.catalog import SERVICES


router = APIRouter()


@router.get("/services", response_model=list[ServiceOut])
async def list_services(
    lang: str | None = Query(default=None),
    accept_language: str | None = Header(default=None),
) -> list[ServiceOut]:
    locale = pick_locale(lang, accept_language)
    return [ServiceOut.from_item(item, locale) for item in SERVICES]
