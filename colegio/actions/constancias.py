import secrets
import time
from datetime import datetime
from html import escape
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.acceso import filtro_estudiante_documentos, puede_ver_estudiante
from colegio.actions.certificados import (
    fecha_larga,
    generar_qr_data_url,
    serializar_certificado as serializar_constancia,
    url_verificacion,
)
from colegio.core.logging import get_logger
from colegio.core.validacion import error_validacion, validar
from colegio.crud.documento import TIPOS_CONSTANCIA, constancia as constancia_crud
from colegio.crud.institucion import institucion as institucion_crud
from colegio.schemas.constancia import ConstanciaCreate, ConstanciaUpdate
from colegio.utils.helpers import (
    ResponseFormatter,
    cargado,
    normalizar_paginacion,
    paginacion,
)

logger = get_logger(__name__)

RUTA_VERIFICACION = "verificar-constancia"
ETIQUETAS_TIPO = {
    "CONSTANCIA_MATRICULA": "Constancia de Matrícula",
    "CONSTANCIA_ESTUDIOS": "Constancia de Estudios",
}


def generar_codigo_verificacion() -> str:
    """CONST-<últimos 6 dígitos del timestamp en ms>-<8 hex aleatorios>"""
    marca = str(int(time.time() * 1000))[-6:]
    return f"CONST-{marca}-{secrets.token_hex(4)}"


def etiqueta_tipo(tipo: Optional[str]) -> str:
    return ETIQUETAS_TIPO.get(tipo, "Constancia Académica")


def generar_html_constancia(constancia, nombre_institucion: Optional[str] = None) -> str:
    estudiante = constancia.estudiante if cargado(constancia, "estudiante") else None
    emisor = constancia.emisor if cargado(constancia, "emisor") else None

    codigo = constancia.codigo_verificacion or constancia.codigo or constancia.id
    enlace = url_verificacion(constancia.codigo_verificacion, ruta=RUTA_VERIFICACION)
    qr = generar_qr_data_url(enlace)
    institucion = escape(nombre_institucion or "Institución Educativa")

    detalle_estudiante = ""
    if estudiante is not None:
        email = (
            f"<p><strong>Email:</strong> {escape(estudiante.email)}</p>"
            if estudiante.email
            else ""
        )
        detalle_estudiante = f"""
        <div class="detalles-estudiante">
            <h3>Información del Estudiante</h3>
            <p><strong>Nombre:</strong> {escape(estudiante.name or "")}</p>
            <p><strong>Código:</strong> {escape(constancia.codigo or "")}</p>
            {email}
        </div>"""

    vigencia = ""
    if constancia.fecha_expiracion:
        vigencia = f" • Válido hasta {fecha_larga(constancia.fecha_expiracion, '')}"

    return f"""<!DOCTYPE html>
<html lang="es">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(constancia.titulo or "Constancia")}</title>
    <style>
        @page {{ size: A4; margin: 2cm; }}
        body {{ font-family: 'Georgia', serif; line-height: 1.6; color: #333; margin: 0; }}
        .container {{ max-width: 800px; margin: 0 auto; padding: 40px; border: 3px double #2c5aa0; }}
        .header {{ text-align: center; border-bottom: 2px solid #2c5aa0; margin-bottom: 30px; }}
        .institucion {{ font-size: 24px; color: #2c5aa0; }}
        .titulo {{ text-align: center; font-size: 28px; letter-spacing: 2px; }}
        .tipo-constancia {{ text-align: center; font-style: italic; color: #555; }}
        .contenido {{ font-size: 17px; text-align: justify; margin: 30px 0; }}
        .detalles-estudiante {{ padding: 15px; border-left: 4px solid #2c5aa0; }}
        .firma-section {{ margin-top: 60px; text-align: center; }}
        .linea-firma {{ border-top: 2px solid #333; width: 250px; margin: 0 auto 10px; }}
        .verificacion {{ margin-top: 40px; display: flex; gap: 20px; align-items: center; }}
        .codigo {{ font-family: 'Courier New', monospace; font-weight: bold; color: #2c5aa0; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1 class="institucion">{institucion}</h1>
        </div>
        <h2 class="titulo">{escape(constancia.titulo or "")}</h2>
        <div class="tipo-constancia">{etiqueta_tipo(constancia.tipo)}</div>
        <div class="contenido">{escape(constancia.contenido or "")}</div>
        {detalle_estudiante}
        <div class="firma-section">
            <div class="linea-firma"></div>
            <p>{escape(emisor.name) if emisor and emisor.name else "Nombre del Emisor"}</p>
            <p>Administrador del Sistema</p>
        </div>
        <div class="footer">
            <div>Emitido el {fecha_larga(constancia.fecha_emision, "No especificada")}{vigencia}</div>
            <div class="verificacion">
                <img src="{qr}" alt="Código QR de verificación" style="width: 100px; height: 100px;" />
                <div>
                    <p><strong>Verificación Digital</strong></p>
                    <p>Escanee el código QR o visite el enlace:</p>
                    <div class="codigo">{escape(enlace)}</div>
                    <p>Código de verificación:</p>
                    <div class="codigo">{escape(codigo)}</div>
                </div>
            </div>
        </div>
    </div>
</body>
</html>
"""


async def _nombre_institucion(db: AsyncSession) -> Optional[str]:
    instituciones = await institucion_crud.get_multi(db, limit=1)
    return instituciones[0].nombre_institucion if instituciones else None


async def registrar_constancia(db: AsyncSession, usuario, data) -> Dict[str, Any]:
    constancia_in, error = validar(ConstanciaCreate, data)
    if error:
        return error

    try:
        codigo_verificacion = generar_codigo_verificacion()
        # Sin código explícito se usa el de verificación sin el prefijo
        codigo = constancia_in.codigo or codigo_verificacion[len("CONST-"):]
        if await constancia_crud.get_by_codigo(db, codigo):
            return ResponseFormatter.conflict("Ya existe una constancia con este código")

        datos = constancia_in.model_dump()
        datos.update({
            "codigo": codigo,
            "codigo_verificacion": codigo_verificacion,
            "fecha_emision": constancia_in.fecha_emision or datetime.utcnow(),
            "estado": "activo",
            "emisor_id": usuario.id,
        })
        constancia = await constancia_crud.create(db, obj_in=datos)
        logger.info("Constancia %s (%s) emitida por %s", codigo, constancia.tipo, usuario.id)
        return ResponseFormatter.success(
            serializar_constancia(constancia), "Constancia registrada exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar constancia: %s", e)
        return ResponseFormatter.internal("Error al registrar la constancia")


async def actualizar_constancia(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    constancia_in, error = validar(ConstanciaUpdate, data)
    if error:
        return error

    try:
        existente = await constancia_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Constancia no encontrada")
        if constancia_in.codigo and await constancia_crud.get_by_codigo(
            db, constancia_in.codigo, excluir_id=id
        ):
            return ResponseFormatter.conflict("Ya existe otra constancia con este código")

        datos = constancia_in.model_dump(exclude_unset=True)
        if not datos.get("codigo"):
            datos.pop("codigo", None)
        datos["estado"] = constancia_in.estado or "activo"
        constancia = await constancia_crud.update(db, db_obj=existente, obj_in=datos)
        return ResponseFormatter.success(
            serializar_constancia(constancia), "Constancia actualizada exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar constancia: %s", e)
        return ResponseFormatter.internal("Error al actualizar la constancia")


async def eliminar_constancia(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        if not await constancia_crud.remove(db, id=id):
            return ResponseFormatter.not_found("Constancia no encontrada")
        return ResponseFormatter.success(None, "Constancia eliminada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar constancia: %s", e)
        return ResponseFormatter.internal("Error al eliminar la constancia")


async def obtener_constancias(
    db: AsyncSession,
    usuario,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    estado: str = "",
    estudiante_id: str = "",
    tipo: str = "",
) -> Dict[str, Any]:
    permitido, estudiante_id = await filtro_estudiante_documentos(db, usuario, estudiante_id)
    if not permitido:
        return ResponseFormatter.forbidden("No tiene permiso para ver estas constancias")

    try:
        page, limit = normalizar_paginacion(page, limit)
        constancias, total = await constancia_crud.get_paginados(
            db,
            page,
            limit,
            search=search,
            estado=estado,
            estudiante_id=estudiante_id,
            tipo=tipo,
        )
        return ResponseFormatter.success({
            "constancias": [serializar_constancia(c) for c in constancias],
            "pagination": paginacion(total, page, limit),
        })
    except Exception as e:
        logger.error("Error al obtener constancias: %s", e)
        return ResponseFormatter.internal("Error al obtener las constancias")


async def obtener_constancias_por_tipo(db: AsyncSession, tipo: str) -> Dict[str, Any]:
    if tipo not in TIPOS_CONSTANCIA:
        return error_validacion({"tipo": ["Tipo de constancia no válido"]})

    try:
        constancias = await constancia_crud.get_por_tipo(db, tipo)
        return ResponseFormatter.success([serializar_constancia(c) for c in constancias])
    except Exception as e:
        logger.error("Error al obtener constancias de tipo %s: %s", tipo, e)
        return ResponseFormatter.internal(f"Error al obtener las constancias de tipo {tipo}")


async def obtener_constancia_por_id(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    try:
        constancia = await constancia_crud.get_with_relations(db, id)
        if not constancia:
            return ResponseFormatter.not_found("Constancia no encontrada")
        if not await puede_ver_estudiante(
            db, usuario, constancia.estudiante_id, incluir_docentes=False
        ):
            return ResponseFormatter.forbidden("No tiene permiso para ver esta constancia")
        return ResponseFormatter.success(serializar_constancia(constancia))
    except Exception as e:
        logger.error("Error al obtener constancia: %s", e)
        return ResponseFormatter.internal("Error al obtener la constancia")


async def obtener_estadisticas_constancias(
    db: AsyncSession, ahora: datetime = None
) -> Dict[str, Any]:
    ahora = ahora or datetime.utcnow()
    inicio_mes = ahora.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    try:
        conteos = await constancia_crud.conteos(db, inicio_mes)
        por_estado = conteos["por_estado"]
        por_tipo = conteos["por_tipo"]
        return ResponseFormatter.success({
            "total": sum(por_estado.values()),
            "activas": por_estado.get("activo", 0),
            "inactivas": por_estado.get("inactivo", 0),
            "porTipo": {
                "matricula": por_tipo.get("CONSTANCIA_MATRICULA", 0),
                "vacante": por_tipo.get("CONSTANCIA_VACANTE", 0),
                "egresado": por_tipo.get("CONSTANCIA_EGRESADO", 0),
            },
            "emitidasEsteMes": conteos["desde"],
        })
    except Exception as e:
        logger.error("Error al obtener estadísticas de constancias: %s", e)
        return ResponseFormatter.internal("Error al obtener estadísticas de constancias")


async def generar_vista_previa_constancia(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    try:
        constancia = await constancia_crud.get_with_relations(db, id)
        if not constancia:
            return ResponseFormatter.not_found("Constancia no encontrada")
        if not await puede_ver_estudiante(
            db, usuario, constancia.estudiante_id, incluir_docentes=False
        ):
            return ResponseFormatter.forbidden("No tiene permiso para ver esta constancia")
        html = generar_html_constancia(constancia, await _nombre_institucion(db))
        return ResponseFormatter.success({
            "htmlContent": html,
            "constancia": serializar_constancia(constancia),
        })
    except Exception as e:
        logger.error("Error al generar vista previa de constancia: %s", e)
        return ResponseFormatter.internal("Error al generar la vista previa de la constancia")


async def generar_pdf_constancia(db: AsyncSession, id: str) -> Dict[str, Any]:
    """Registra la URL del PDF, marca la constancia como verificada y devuelve su HTML"""
    try:
        constancia = await constancia_crud.get_with_relations(db, id)
        if not constancia:
            return ResponseFormatter.not_found("Constancia no encontrada")
        nombre_institucion = await _nombre_institucion(db)
        if not nombre_institucion:
            return ResponseFormatter.not_found("No se pudo obtener información de la institución")

        html = generar_html_constancia(constancia, nombre_institucion)
        archivo_url = f"/api/v1/constancias/{id}/pdf"
        await constancia_crud.update(
            db, db_obj=constancia, obj_in={"archivo_url": archivo_url, "verificado": True}
        )
        return ResponseFormatter.success(
            {"archivoUrl": archivo_url, "htmlContent": html}, "PDF generado correctamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al generar PDF de constancia: %s", e)
        return ResponseFormatter.internal("Error al generar el PDF de la constancia")


async def verificar_constancia(db: AsyncSession, codigo: str) -> Dict[str, Any]:
    """Consulta pública; acepta el código, el código de verificación o el id"""
    try:
        constancia = await constancia_crud.buscar_para_verificar(db, codigo)
        if not constancia:
            return ResponseFormatter.not_found("Constancia no encontrada o código inválido")
        return ResponseFormatter.success(
            serializar_constancia(constancia), "Constancia verificada correctamente"
        )
    except Exception as e:
        logger.error("Error al verificar constancia: %s", e)
        return ResponseFormatter.internal("Error al verificar la constancia")
