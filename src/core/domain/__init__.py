"""Modelos del dominio: topics, tokens, instancias, resultados y errores.

El dominio no conoce HTTP, CLI, ni SDKs: solo conceptos del problema.
"""
