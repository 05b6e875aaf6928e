from colegio.core.estructura_academica import opciones_cascada

NIVELES = [{"nombre": "PRIMARIA"}, {"nombre": "SECUNDARIA"}, {"nombre": "PRIMARIA"}]
SECCIONES = [
    {"id": "s1", "nivel": {"nombre": "PRIMARIA"}, "grado": {"id": "g1", "nombre": "Primero"}, "seccion": "A"},
    {"id": "s2", "nivel": {"nombre": "PRIMARIA"}, "grado": {"id": "g1", "nombre": "Primero"}, "seccion": "B"},
    {"id": "s3", "nivel": {"nombre": "PRIMARIA"}, "grado": {"id": "g2", "codigo": "PRIMARIA_SEGUNDO"}, "seccion": None},
    {"id": "s4", "nivel": {"nombre": "SECUNDARIA"}, "grado": {"id": "g9", "nombre": "Primero"}, "seccion": "A"},
]


def test_sin_nivel_seleccionado():
    opciones = opciones_cascada(NIVELES, SECCIONES)
    assert opciones["niveles"] == ["PRIMARIA", "SECUNDARIA"]
    assert opciones["nivelesAcademicosFiltrados"] == []
    assert opciones["gradosUnicos"] == []
    assert opciones["seccionesFiltradas"] == []


def test_filtra_por_nivel_sin_distinguir_mayusculas():
    opciones = opciones_cascada(NIVELES, SECCIONES, nivel="primaria")
    assert [s["id"] for s in opciones["nivelesAcademicosFiltrados"]] == ["s1", "s2", "s3"]
    assert opciones["gradosUnicos"] == [
        {"id": "g1", "nombre": "Primero"},
        {"id": "g2", "nombre": "PRIMARIA SEGUNDO"},
    ]


def test_secciones_del_grado():
    opciones = opciones_cascada(NIVELES, SECCIONES, nivel="PRIMARIA", grado_id="g2")
    assert opciones["seccionesFiltradas"] == [
        {"id": "s3", "seccion": "Única", "nivelAcademicoId": "s3"}
    ]
