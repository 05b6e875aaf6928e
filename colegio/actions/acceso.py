from sqlalchemy.ext.asyncio import AsyncSession

from colegio.crud.relacion_familiar import relacion_familiar

ROLES_GESTION = ("administrativo", "director")


async def puede_ver_estudiante(
    db: AsyncSession, usuario, estudiante_id: str, incluir_docentes: bool = True
) -> bool:
    """
    Personal, el propio estudiante o un padre vinculado pueden ver sus datos.

    Con ``incluir_docentes=False`` los profesores quedan fuera (pagos y
    documentos del estudiante no son información académica).
    """
    if usuario.role in ROLES_GESTION or usuario.id == estudiante_id:
        return True
    if usuario.role == "profesor":
        return incluir_docentes
    if usuario.role == "padre" and estudiante_id:
        return await relacion_familiar.get_relacion(db, usuario.id, estudiante_id) is not None
    return False


async def filtro_estudiante_documentos(db: AsyncSession, usuario, estudiante_id: str):
    """
    Filtro de estudiante para listar documentos: (permitido, estudiante_id).

    La gestión ve todo; un estudiante solo lo suyo y un padre debe indicar
    uno de sus hijos.
    """
    if usuario.role in ROLES_GESTION:
        return True, estudiante_id
    if usuario.role == "estudiante":
        estudiante_id = usuario.id
    permitido = await puede_ver_estudiante(db, usuario, estudiante_id, incluir_docentes=False)
    return permitido, estudiante_id
