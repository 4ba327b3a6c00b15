"""API errors and their JSON rendering."""

import logging

import falcon
import falcon.asgi

from educhat.domain.exceptions import Conflict, NotFound, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)

MSG_UNAUTHENTICATED = "Acesso negado - usuário não autenticado"
MSG_FORBIDDEN = "Acesso negado - permissão insuficiente"
MSG_FORBIDDEN_OWN = "Acesso negado - você só pode acessar seus próprios recursos"
MSG_FORBIDDEN_ADMIN = "Acesso negado - apenas administradores"
MSG_MISSING_RESOURCE_ID = "ID do recurso não fornecido"
MSG_INTERNAL = "Erro interno do servidor"


class ApiError(Exception):
    """Error with an HTTP status and a client-safe message."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


_NOT_FOUND_MESSAGES = {
    "User": "Usuário não encontrado",
    "Role": "Função não encontrada",
    "Permission": "Permissão não encontrada",
    "RolePermission": "Permissão não atribuída à função",
    "CustomRule": "Regra customizada não encontrada",
}


def domain_error(ex: Exception) -> ApiError:
    """Map domain exceptions raised by use cases to API errors."""
    if isinstance(ex, NotFound):
        return ApiError(404, _NOT_FOUND_MESSAGES.get(ex.entity, "Recurso não encontrado"))
    if isinstance(ex, ValidationError):
        return ApiError(400, str(ex))
    if isinstance(ex, Conflict):
        return ApiError(409, str(ex))
    if isinstance(ex, PermissionDenied):
        return ApiError(403, str(ex))
    raise ex


async def handle_api_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: ApiError, params: dict
) -> None:
    resp.status = falcon.code_to_http_status(ex.status)
    resp.media = {"message": ex.message}


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    await handle_api_error(req, resp, domain_error(ex), params)


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    logger.error("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"message": MSG_INTERNAL}


def register_error_handlers(app: falcon.asgi.App) -> None:
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(
        (NotFound, ValidationError, Conflict, PermissionDenied), handle_domain_error
    )
    app.add_error_handler(ApiError, handle_api_error)
