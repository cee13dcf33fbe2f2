# NG-HEADER: Nombre de archivo: auth.py
# NG-HEADER: Ubicación: services/auth.py
# NG-HEADER: Descripción: Autenticación JWT/token para los endpoints de transacciones.
# NG-HEADER: Lineamientos: Ver AGENTS.md
"""Autenticación opcional de los endpoints de transacciones.

Con ``AUTH_ENABLED`` apagado la dependencia no hace nada. Encendida acepta:

- ``Authorization: Bearer <jwt>`` firmado con ``JWT_SECRET`` (HS256), emitido
  por el servicio de autenticación. Vencido -> 401, inválido -> 403.
- ``Authorization: Bearer <API_TOKEN>`` (token estático para integraciones).
- ``X-Internal-Service-Token`` de los servicios internos.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

import jwt
from fastapi import HTTPException, Request

from core.config import settings

logger = logging.getLogger("inventario.auth")


def _matches(candidate: Optional[str], expected: Optional[str]) -> bool:
    if not candidate or not expected:
        # Token no configurado: rechazar
        return False
    # Comparación de tiempo constante
    return secrets.compare_digest(candidate.encode(), expected.encode())


def verify_internal_service_token(request: Request) -> bool:
    """True si la petición trae un ``X-Internal-Service-Token`` válido."""
    return _matches(request.headers.get("X-Internal-Service-Token"), settings.internal_service_token)


def decode_jwt(token: str) -> dict:
    """Valida firma y vencimiento; devuelve los claims.

    Raises:
        HTTPException: 401 si el token venció, 403 si es inválido o no hay secreto.
    """
    if not settings.jwt_secret:
        raise HTTPException(status_code=403, detail="Token inválido")
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        logger.warning("auth: token vencido")
        raise HTTPException(status_code=401, detail="Token vencido")
    except jwt.InvalidTokenError as exc:
        logger.warning("auth: token inválido (%s)", exc)
        raise HTTPException(status_code=403, detail="Token inválido")


def _bearer(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if header is None:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Header Authorization inválido")
    return token.strip()


async def require_api_token(request: Request) -> None:
    """Dependencia de FastAPI para los routers de transacciones."""
    if not settings.auth_enabled:
        return
    if verify_internal_service_token(request):
        return
    token = _bearer(request)
    if token is None:
        if request.headers.get("X-Internal-Service-Token"):
            logger.warning("auth: token interno inválido path=%s", request.url.path)
            raise HTTPException(status_code=403, detail="Token inválido")
        raise HTTPException(status_code=401, detail="Autenticación requerida")
    if _matches(token, settings.api_token):
        return
    request.state.user = decode_jwt(token)
