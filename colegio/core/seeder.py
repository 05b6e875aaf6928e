from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.config.database import async_session_factory
from colegio.config.settings import settings
from colegio.core.estructura_academica import GRADOS_POR_NIVEL
from colegio.core.logging import get_logger
from colegio.core.security import get_password_hash
from colegio.models.institucion import InstitucionEducativa
from colegio.models.nivel import Grado, Nivel, NivelAcademico
from colegio.models.periodo import PeriodoAcademico
from colegio.models.permiso import Permiso, RolPermiso, UsuarioPermiso
from colegio.models.usuario import Usuario

logger = get_logger(__name__)

PERMISOS_BASE = [
    # ESTUDIANTES
    ("ESTUDIANTE_VER", "Ver estudiantes", "ESTUDIANTES"),
    ("ESTUDIANTE_CREAR", "Crear estudiantes", "ESTUDIANTES"),
    ("ESTUDIANTE_ACTUALIZAR", "Actualizar estudiantes", "ESTUDIANTES"),
    ("ESTUDIANTE_ELIMINAR", "Eliminar estudiantes", "ESTUDIANTES"),
    ("ESTUDIANTE_MATRICULAR", "Matricular estudiantes", "ESTUDIANTES"),
    ("ESTUDIANTE_CAMBIAR_SECCION", "Cambiar sección de estudiante", "ESTUDIANTES"),
    # ACADEMICO
    ("NOTA_VER", "Ver notas", "ACADEMICO"),
    ("NOTA_CREAR", "Crear notas", "ACADEMICO"),
    ("NOTA_ACTUALIZAR", "Actualizar notas", "ACADEMICO"),
    ("NOTA_ELIMINAR", "Eliminar notas", "ACADEMICO"),
    ("EVALUACION_CREAR", "Crear evaluaciones", "ACADEMICO"),
    ("ASISTENCIA_REGISTRAR", "Registrar asistencia", "ACADEMICO"),
    ("HORARIO_GESTIONAR", "Gestionar horarios", "ACADEMICO"),
    # ADMINISTRATIVO
    ("PAGO_VER", "Ver pagos", "ADMINISTRATIVO"),
    ("PAGO_CREAR", "Crear pagos", "ADMINISTRATIVO"),
    ("DOCUMENTO_VERIFICAR", "Verificar documentos", "ADMINISTRATIVO"),
    ("REPORTE_GENERAR", "Generar reportes", "ADMINISTRATIVO"),
    ("USUARIO_GESTIONAR", "Gestionar usuarios", "ADMINISTRATIVO"),
    # INSTITUCIONAL
    ("INSTITUCION_CONFIGURAR", "Configurar institución", "INSTITUCIONAL"),
    ("PERIODO_ACADEMICO_CREAR", "Crear período académico", "INSTITUCIONAL"),
    ("NIVEL_ACADEMICO_GESTIONAR", "Gestionar niveles académicos", "INSTITUCIONAL"),
    ("AREA_CURRICULAR_CREAR", "Crear área curricular", "INSTITUCIONAL"),
]

# None = todos los permisos
PERMISOS_POR_ROL = {
    "estudiante": ["NOTA_VER", "ASISTENCIA_REGISTRAR"],
    "profesor": [
        "ESTUDIANTE_VER",
        "NOTA_VER",
        "NOTA_CREAR",
        "NOTA_ACTUALIZAR",
        "EVALUACION_CREAR",
        "ASISTENCIA_REGISTRAR",
        "HORARIO_GESTIONAR",
    ],
    "administrativo": [
        "ESTUDIANTE_VER",
        "ESTUDIANTE_CREAR",
        "ESTUDIANTE_ACTUALIZAR",
        "ESTUDIANTE_MATRICULAR",
        "PAGO_VER",
        "PAGO_CREAR",
        "DOCUMENTO_VERIFICAR",
        "REPORTE_GENERAR",
    ],
    "director": None,
    "padre": ["ESTUDIANTE_VER", "NOTA_VER", "PAGO_VER"],
}


async def seed_database():
    """Poblar la base de datos con datos iniciales"""

    async with async_session_factory() as db:
        try:
            logger.info("Iniciando seeding de la base de datos...")
            anio = datetime.utcnow().year

            # 1. Institución
            institucion = InstitucionEducativa(
                codigo_modular="0000001",
                nombre_institucion="Institución Educativa Demo",
                tipo_gestion="PUBLICA",
                modalidad="EBR",
                ugel="UGEL 01",
                dre="DRE Lima Metropolitana",
                ubigeo="150101",
                direccion="Av. Principal 123",
                distrito="Lima",
                provincia="Lima",
                departamento="Lima",
                fecha_inicio_clases=date(anio, 3, 1),
                fecha_fin_clases=date(anio, 12, 20),
            )
            db.add(institucion)
            await db.flush()

            # 2. Niveles, grados y una sección "A" por grado
            logger.info("Creando niveles, grados y secciones...")
            secciones = 0
            for nombre_nivel, grados in GRADOS_POR_NIVEL.items():
                nivel = Nivel(nombre=nombre_nivel, institucion_id=institucion.id)
                db.add(nivel)
                await db.flush()
                for orden, grado_data in enumerate(grados, start=1):
                    grado = Grado(
                        codigo=grado_data["value"],
                        nombre=grado_data["label"],
                        orden=orden,
                        nivel_id=nivel.id,
                    )
                    db.add(grado)
                    await db.flush()
                    db.add(
                        NivelAcademico(
                            nivel_id=nivel.id,
                            grado_id=grado.id,
                            seccion="A",
                            institucion_id=institucion.id,
                        )
                    )
                    secciones += 1

            # 3. Periodos académicos (4 bimestres)
            logger.info("Creando periodos académicos...")
            limites = [
                (date(anio, 3, 1), date(anio, 5, 10)),
                (date(anio, 5, 20), date(anio, 7, 20)),
                (date(anio, 8, 5), date(anio, 10, 10)),
                (date(anio, 10, 20), date(anio, 12, 20)),
            ]
            for numero, (inicio, fin) in enumerate(limites, start=1):
                db.add(
                    PeriodoAcademico(
                        nombre=f"Bimestre {numero}",
                        tipo="BIMESTRE",
                        numero=numero,
                        anio_escolar=anio,
                        fecha_inicio=inicio,
                        fecha_fin=fin,
                        institucion_id=institucion.id,
                    )
                )

            # 4. Permisos y permisos por rol
            logger.info("Creando permisos...")
            permisos = {}
            for codigo, nombre, modulo in PERMISOS_BASE:
                permiso = Permiso(codigo=codigo, nombre=nombre, descripcion="", modulo=modulo)
                db.add(permiso)
                permisos[codigo] = permiso
            await db.flush()

            for rol, codigos in PERMISOS_POR_ROL.items():
                for codigo in codigos if codigos is not None else list(permisos):
                    db.add(RolPermiso(rol=rol, permiso_id=permisos[codigo].id))

            # 5. Usuario administrador con todos los permisos
            logger.info("Creando usuario administrador...")
            admin = Usuario(
                email=settings.seed_admin_email,
                name="Administrador del Sistema",
                apellido_paterno="Sistema",
                apellido_materno="Administrador",
                dni="12345678",
                password=get_password_hash(settings.seed_admin_password),
                role="director",
                activo=True,
                institucion_id=institucion.id,
            )
            db.add(admin)
            await db.flush()
            for permiso in permisos.values():
                db.add(UsuarioPermiso(usuario_id=admin.id, permiso_id=permiso.id))

            await db.commit()

            logger.info(
                "Seeding completado: %d niveles, %d secciones, %d permisos, admin %s",
                len(GRADOS_POR_NIVEL),
                secciones,
                len(permisos),
                admin.email,
            )

        except Exception as e:
            logger.error("Error durante el seeding: %s", e)
            await db.rollback()
            raise


async def check_if_seeded(db: AsyncSession) -> bool:
    """Verificar si la base de datos ya tiene datos"""
    result = await db.execute(select(func.count()).select_from(Usuario))
    return (result.scalar() or 0) > 0


async def run_seeder():
    """Ejecutar seeder solo si no hay datos"""
    async with async_session_factory() as db:
        if await check_if_seeded(db):
            logger.info("Base de datos ya tiene datos, saltando seeding...")
            return False

    await seed_database()
    return True
