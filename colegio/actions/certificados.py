import base64
import io
import secrets
import time
from datetime import datetime
from html import escape
from typing import Any, Dict, Optional

import qrcode
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.acceso import filtro_estudiante_documentos, puede_ver_estudiante
from colegio.config.settings import settings
from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.documento import TIPO_CERTIFICADO, certificado as certificado_crud
from colegio.schemas.certificado import CertificadoCreate, CertificadoUpdate
from colegio.utils.helpers import (
    ResponseFormatter,
    cargado,
    columnas,
    normalizar_paginacion,
    paginacion,
)

logger = get_logger(__name__)

QR_COLOR = "#2c5aa0"
QR_FALLBACK = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8"
    "AAAAASUVORK5CYII="
)
MESES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(numero: int) -> str:
    if numero == 0:
        return "0"
    digitos = []
    while numero:
        numero, resto = divmod(numero, 36)
        digitos.append(_BASE36[resto])
    return "".join(reversed(digitos))


def generar_codigo_verificacion() -> str:
    """CERT-<timestamp ms en base 36>-<16 hex aleatorios>, en mayúsculas"""
    marca = _base36(int(time.time() * 1000))
    return f"CERT-{marca}-{secrets.token_hex(8)}".upper()


def url_verificacion(codigo: Optional[str] = None, ruta: str = "verificar-certificado") -> str:
    url = f"{settings.public_base_url}/{ruta}"
    if codigo is not None:
        url = f"{url}?codigo={codigo}"
    return url


def generar_qr_data_url(contenido: str) -> str:
    """PNG del código QR como data URL; imagen vacía de 1x1 si falla"""
    try:
        qr = qrcode.QRCode(box_size=4, border=1)
        qr.add_data(contenido)
        qr.make(fit=True)
        imagen = qr.make_image(fill_color=QR_COLOR, back_color="#FFFFFF")
        buffer = io.BytesIO()
        imagen.save(buffer, format="PNG")
        return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
    except Exception as e:
        logger.error("Error al generar QR code: %s", e)
        return QR_FALLBACK


def fecha_larga(fecha: Optional[datetime], por_defecto: str) -> str:
    if fecha is None:
        return por_defecto
    return f"{fecha.day} de {MESES[fecha.month - 1]} de {fecha.year}"


def _persona(u, *campos: str) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    return {campo: getattr(u, campo) for campo in ("id",) + campos}


def serializar_certificado(c) -> Dict[str, Any]:
    data = columnas(c)
    if cargado(c, "estudiante"):
        data["estudiante"] = _persona(c.estudiante, "name", "email", "dni")
    if cargado(c, "emisor"):
        data["emisor"] = _persona(c.emisor, "name", "email")
    return data


def generar_html_certificado(certificado) -> str:
    estudiante = certificado.estudiante if cargado(certificado, "estudiante") else None
    emisor = certificado.emisor if cargado(certificado, "emisor") else None

    codigo_verificacion = certificado.codigo_verificacion or certificado.id or "sin-codigo"
    qr = generar_qr_data_url(url_verificacion(codigo_verificacion))

    nombre = escape(estudiante.name) if estudiante and estudiante.name else "N/A"
    dni = escape(estudiante.dni) if estudiante and estudiante.dni else "N/A"
    contenido = escape(
        certificado.contenido
        or "ha completado satisfactoriamente sus estudios según los registros "
        "académicos de esta institución."
    )
    estado = certificado.estado.upper() if certificado.estado else "ACTIVO"

    return f"""<!DOCTYPE html>
<html lang="es">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Certificado de Estudios</title>
    <style>
        @page {{ size: A4; margin: 2cm; }}
        body {{ font-family: 'Times New Roman', serif; line-height: 1.6; color: #333; margin: 0; }}
        .certificado {{ max-width: 800px; margin: 0 auto; padding: 40px; border: 3px solid #2c5aa0; }}
        .header {{ text-align: center; margin-bottom: 40px; border-bottom: 2px solid #2c5aa0; }}
        .institucion {{ font-size: 24px; font-weight: bold; color: #2c5aa0; }}
        .titulo-certificado {{ font-size: 32px; font-weight: bold; color: #2c5aa0;
                               text-align: center; margin: 40px 0; letter-spacing: 2px; }}
        .contenido {{ font-size: 18px; text-align: justify; line-height: 2; }}
        .estudiante {{ font-weight: bold; color: #2c5aa0; text-transform: uppercase; }}
        .detalles {{ margin: 40px 0; display: grid; grid-template-columns: 1fr 1fr; gap: 20px; }}
        .detalle-item {{ padding: 10px; background: white; border-left: 4px solid #2c5aa0; }}
        .detalle-label {{ font-weight: bold; color: #2c5aa0; font-size: 14px; }}
        .firma {{ margin-top: 60px; display: flex; justify-content: space-between; }}
        .firma-item {{ text-align: center; width: 200px; }}
        .firma-linea {{ border-top: 2px solid #333; margin-bottom: 10px; }}
        .codigo-verificacion {{ margin-top: 40px; padding: 20px; border: 1px dashed #2c5aa0; }}
        .codigo {{ font-family: 'Courier New', monospace; font-weight: bold; color: #2c5aa0; }}
    </style>
</head>
<body>
    <div class="certificado">
        <div class="header">
            <div class="institucion">INSTITUCIÓN EDUCATIVA</div>
            <div>Sistema de Gestión Académica</div>
        </div>
        <div class="titulo-certificado">CERTIFICADO DE ESTUDIOS</div>
        <div class="contenido">
            La Institución Educativa <strong>certifica</strong> que el/la estudiante
            <span class="estudiante">{nombre}</span>
            identificado(a) con DNI N° <strong>{dni}</strong>,
            {contenido}
        </div>
        <div class="detalles">
            <div class="detalle-item">
                <div class="detalle-label">CÓDIGO DEL CERTIFICADO</div>
                <div>{escape(certificado.codigo or "Sin código")}</div>
            </div>
            <div class="detalle-item">
                <div class="detalle-label">FECHA DE EMISIÓN</div>
                <div>{fecha_larga(certificado.fecha_emision, "No especificada")}</div>
            </div>
            <div class="detalle-item">
                <div class="detalle-label">VÁLIDO HASTA</div>
                <div>{fecha_larga(certificado.fecha_expiracion, "Sin vencimiento")}</div>
            </div>
            <div class="detalle-item">
                <div class="detalle-label">ESTADO</div>
                <div>{escape(estado)}</div>
            </div>
        </div>
        <div class="firma">
            <div class="firma-item">
                <div class="firma-linea"></div>
                <div><strong>Director(a)</strong></div>
                <div>Institución Educativa</div>
            </div>
            <div class="firma-item">
                <div class="firma-linea"></div>
                <div><strong>Secretario(a) Académico(a)</strong></div>
                <div>{escape(emisor.name or "") if emisor else ""}</div>
            </div>
        </div>
        <div class="codigo-verificacion">
            <div><strong>Código de Verificación:</strong></div>
            <div class="codigo">{escape(codigo_verificacion)}</div>
            <div>Verifique la autenticidad de este documento en:</div>
            <div><strong>{url_verificacion()}</strong></div>
            <div>Escanee el código QR o ingrese el código manualmente</div>
            <img src="{qr}" alt="QR Code para verificación" style="width: 100px; height: 100px;" />
        </div>
    </div>
</body>
</html>
"""


async def registrar_certificado(db: AsyncSession, usuario, data) -> Dict[str, Any]:
    certificado_in, error = validar(CertificadoCreate, data)
    if error:
        return error

    try:
        if await certificado_crud.get_by_codigo(db, certificado_in.codigo):
            return ResponseFormatter.conflict("Ya existe un certificado con este código")

        datos = certificado_in.model_dump()
        datos.update({
            "tipo": TIPO_CERTIFICADO,
            "codigo_verificacion": generar_codigo_verificacion(),
            "fecha_emision": datetime.utcnow(),
            "emisor_id": usuario.id,
        })
        certificado = await certificado_crud.create(db, obj_in=datos)
        logger.info("Certificado %s emitido por %s", certificado.codigo, certificado.emisor_id)
        return ResponseFormatter.success(
            serializar_certificado(certificado), "Certificado registrado exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar certificado: %s", e)
        return ResponseFormatter.internal("Error al registrar el certificado")


async def actualizar_certificado(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    certificado_in, error = validar(CertificadoUpdate, data)
    if error:
        return error

    try:
        existente = await certificado_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Certificado no encontrado")
        if await certificado_crud.get_by_codigo(db, certificado_in.codigo, excluir_id=id):
            return ResponseFormatter.conflict("Ya existe otro certificado con este código")

        certificado = await certificado_crud.update(db, db_obj=existente, obj_in=certificado_in)
        return ResponseFormatter.success(
            serializar_certificado(certificado), "Certificado actualizado exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar certificado: %s", e)
        return ResponseFormatter.internal("Error al actualizar el certificado")


async def eliminar_certificado(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        if not await certificado_crud.remove(db, id=id):
            return ResponseFormatter.not_found("Certificado no encontrado")
        return ResponseFormatter.success(None, "Certificado eliminado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar certificado: %s", e)
        return ResponseFormatter.internal("Error al eliminar el certificado")


async def obtener_certificados(
    db: AsyncSession,
    usuario,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    estado: str = "",
    estudiante_id: str = "",
) -> Dict[str, Any]:
    permitido, estudiante_id = await filtro_estudiante_documentos(db, usuario, estudiante_id)
    if not permitido:
        return ResponseFormatter.forbidden("No tiene permiso para ver estos certificados")

    try:
        page, limit = normalizar_paginacion(page, limit)
        certificados, total = await certificado_crud.get_paginados(
            db, page, limit, search=search, estado=estado, estudiante_id=estudiante_id
        )
        return ResponseFormatter.success({
            "certificados": [serializar_certificado(c) for c in certificados],
            "pagination": paginacion(total, page, limit),
        })
    except Exception as e:
        logger.error("Error al obtener certificados: %s", e)
        return ResponseFormatter.internal("Error al obtener los certificados")


async def obtener_certificado_por_id(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    try:
        certificado = await certificado_crud.get_with_relations(db, id)
        if not certificado:
            return ResponseFormatter.not_found("Certificado no encontrado")
        if not await puede_ver_estudiante(
            db, usuario, certificado.estudiante_id, incluir_docentes=False
        ):
            return ResponseFormatter.forbidden("No tiene permiso para ver este certificado")
        return ResponseFormatter.success(serializar_certificado(certificado))
    except Exception as e:
        logger.error("Error al obtener certificado: %s", e)
        return ResponseFormatter.internal("Error al obtener el certificado")


async def generar_pdf_certificado(db: AsyncSession, id: str) -> Dict[str, Any]:
    """Registra la URL del PDF y devuelve el HTML que lo compone"""
    try:
        certificado = await certificado_crud.get_with_relations(db, id)
        if not certificado:
            return ResponseFormatter.not_found("Certificado no encontrado")

        html = generar_html_certificado(certificado)
        archivo_url = f"/api/v1/certificados/{id}/pdf"
        await certificado_crud.update(
            db, db_obj=certificado, obj_in={"archivo_url": archivo_url, "firmado": True}
        )
        return ResponseFormatter.success(
            {"archivoUrl": archivo_url, "htmlContent": html}, "PDF generado correctamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al generar PDF: %s", e)
        return ResponseFormatter.internal("Error al generar el PDF")


async def generar_vista_previa_certificado(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    try:
        certificado = await certificado_crud.get_with_relations(db, id)
        if not certificado:
            return ResponseFormatter.not_found("Certificado no encontrado")
        if not await puede_ver_estudiante(
            db, usuario, certificado.estudiante_id, incluir_docentes=False
        ):
            return ResponseFormatter.forbidden("No tiene permiso para ver este certificado")
        return ResponseFormatter.success({
            "htmlContent": generar_html_certificado(certificado),
            "certificado": serializar_certificado(certificado),
        })
    except Exception as e:
        logger.error("Error al generar vista previa: %s", e)
        return ResponseFormatter.internal("Error al generar la vista previa")


async def verificar_certificado(db: AsyncSession, codigo_verificacion: str) -> Dict[str, Any]:
    try:
        certificado = await certificado_crud.get_by_codigo_verificacion(db, codigo_verificacion)
        if not certificado:
            return ResponseFormatter.not_found("Certificado no encontrado o código inválido")

        data = serializar_certificado(certificado)
        await certificado_crud.update(db, db_obj=certificado, obj_in={"verificado": True})
        data["verificado"] = True
        return ResponseFormatter.success(data, "Certificado verificado correctamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al verificar certificado: %s", e)
        return ResponseFormatter.internal("Error al verificar el certificado")
