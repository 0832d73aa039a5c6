"""Configuración: settings, logging y constantes."""
