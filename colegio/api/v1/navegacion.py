from fastapi import APIRouter, Depends

from colegio.api.deps import get_current_active_user
from colegio.core.navegacion import accesos_rapidos_para_rol, rutas_para_rol
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()


@router.get("/", response_model=dict)
async def navegacion(current_user=Depends(get_current_active_user)):
    """Menú lateral y accesos rápidos visibles para el rol del usuario"""
    return ResponseFormatter.success({
        "rutas": rutas_para_rol(current_user.role),
        "accesosRapidos": accesos_rapidos_para_rol(current_user.role),
    })
