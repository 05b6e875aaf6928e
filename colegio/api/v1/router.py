from fastapi import APIRouter

from colegio.api.v1 import (
    asistencias, certificados, constancias, cursos, dashboard, evaluaciones, familias,
    instituciones, matriculas, navegacion, niveles, notas, pagos, periodos, permisos,
    usuarios
)

api_router = APIRouter()

# Gestión académica
api_router.include_router(
    instituciones.router, prefix="/instituciones", tags=["instituciones"]
)
api_router.include_router(niveles.router, prefix="/niveles", tags=["niveles"])
api_router.include_router(cursos.router, prefix="/cursos", tags=["cursos"])
api_router.include_router(periodos.router, prefix="/periodos", tags=["periodos"])
api_router.include_router(matriculas.router, prefix="/matriculas", tags=["matriculas"])
api_router.include_router(
    evaluaciones.router, prefix="/evaluaciones", tags=["evaluaciones"]
)
api_router.include_router(notas.router, prefix="/notas", tags=["notas"])
api_router.include_router(asistencias.router, prefix="/asistencias", tags=["asistencias"])

# Administración
api_router.include_router(pagos.router, prefix="/pagos", tags=["pagos"])
api_router.include_router(
    certificados.router, prefix="/certificados", tags=["certificados"]
)
api_router.include_router(
    constancias.router, prefix="/constancias", tags=["constancias"]
)
api_router.include_router(permisos.router, prefix="/permisos", tags=["permisos"])
api_router.include_router(usuarios.router, prefix="/usuarios", tags=["usuarios"])
api_router.include_router(familias.router, prefix="/familias", tags=["familias"])

# Panel
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(navegacion.router, prefix="/navegacion", tags=["navegacion"])
