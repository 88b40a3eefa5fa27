"""Modelos y entidades del dominio.

Por qué:
- Aquí viven los value types de una llamada (descriptor, modos de parseo)
  y la taxonomía de errores normalizados.
- El dominio no conoce httpx ni la CLI: solo conceptos del problema.
"""
