"""Core: configuración, dominio, contratos y servicios."""
