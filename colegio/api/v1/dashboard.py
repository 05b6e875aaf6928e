from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.dashboard import obtener_metricas_dashboard
from colegio.api.deps import require_roles
from colegio.config.database import get_db
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()


@router.get("/metricas", response_model=dict)
async def metricas(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("administrativo", "director")),
):
    return ResponseFormatter.to_response(await obtener_metricas_dashboard(db))
