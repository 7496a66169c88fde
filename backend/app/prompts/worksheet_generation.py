"""Prompt template for worksheet generation.

The template carries no digits of its own: the requested exercise count is the
only number in a rendered prompt. Subject, level and topic are each placed
once, and each section heading appears once.
"""

SECTION_SUMMARY = "💡 **Resumen Rápido**"
SECTION_EXAMPLE = "## 🧠 Ejemplo Resuelto"
SECTION_EXERCISES = "## ✍️ Ejercicios Prácticos"
SECTION_SOLUTIONS = "### ✅ Soluciones (Para el profesor)"

NO_EXTRA_INSTRUCTIONS = "Ninguna"

WORKSHEET_GENERATION_PROMPT = """Actúa como un profesor experto y crea una ficha educativa visual y limpia en MARKDOWN.

DATOS DE LA FICHA:
- Asignatura: {subject}
- Nivel educativo: {level}
- Instrucciones extra: {instructions}

REGLAS DE FORMATO (ESTRICTO):
- 🚫 NO uses LaTeX ni signos de dólar ($). Escribe las fórmulas en texto simple (ej: "x al cuadrado", "tres cuartos").
- 🚫 NO uses bloques de código (```). Devuelve el Markdown puro directamente.
- Usa emojis para hacer la ficha amigable y visual.
- Usa líneas horizontales (---) para separar secciones claramente.

ESTRUCTURA OBLIGATORIA DE LA RESPUESTA:

# {topic}

> """ + SECTION_SUMMARY + """:
> (Explica el concepto en dos o tres líneas sencillas adaptadas al nivel educativo indicado).

---

""" + SECTION_EXAMPLE + """
(Pon un ejemplo paso a paso muy claro usando texto simple).

---

""" + SECTION_EXERCISES + """
(Genera exactamente {exercise_count} ejercicios. Usa una lista numerada y deja una línea ________ para responder en cada uno).

---

""" + SECTION_SOLUTIONS + """
(Pon las respuestas aquí abajo en cursiva y letra pequeña).
"""
