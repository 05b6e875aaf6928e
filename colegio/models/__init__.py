from .base import BaseModel
from .institucion import InstitucionEducativa
from .usuario import Usuario
from .relacion_familiar import RelacionFamiliar
from .nivel import Nivel, Grado, NivelAcademico
from .curso import AreaCurricular, Curso
from .periodo import PeriodoAcademico
from .matricula import Matricula, MatriculaCurso
from .evaluacion import Evaluacion
from .nota import Nota
from .asistencia import Asistencia
from .documento import Documento
from .pago import Pago
from .permiso import Permiso, RolPermiso, UsuarioPermiso

__all__ = [
    "BaseModel",
    "InstitucionEducativa",
    "Usuario",
    "RelacionFamiliar",
    "Nivel",
    "Grado",
    "NivelAcademico",
    "AreaCurricular",
    "Curso",
    "PeriodoAcademico",
    "Matricula",
    "MatriculaCurso",
    "Evaluacion",
    "Nota",
    "Asistencia",
    "Documento",
    "Pago",
    "Permiso",
    "RolPermiso",
    "UsuarioPermiso",
]
