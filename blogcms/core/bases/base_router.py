from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from blogcms.core import exceptions
from blogcms.core.bases.base_service import BaseService

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


class BaseRouter:
    """Base router class: owns an APIRouter and registers routes on it.

    Errors raised by services are ServiceException subclasses and are turned
    into error responses by the application-level handlers.
    """

    upload_field: Optional[str] = None

    def __init__(
        self,
        service: BaseService,
        tags: Optional[List[str]] = None,
        prefix: str = "",
        dependencies: Optional[List[Any]] = None,
    ):
        self.service = service
        self.tags = tags or [self.__class__.__name__.replace("Router", "")]
        self.prefix = prefix

        # Create router
        self.router = APIRouter(
            prefix=self.prefix,
            tags=self.tags,  # type:ignore
            dependencies=dependencies or [],  # type:ignore
        )

        # Register routes
        self._register_routes()

    def _register_routes(self) -> None:
        """Register all routes. Subclasses override this."""
        raise NotImplementedError

    async def _read_payload(self, request: Request) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
        """Read a JSON or form body, splitting off the optional upload.

        Form submissions may carry one file under ``upload_field``; JSON
        bodies never carry files.
        """
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            payload: Dict[str, Any] = {}
            upload: Optional[UploadFile] = None
            for key, value in form.multi_items():
                if isinstance(value, UploadFile):
                    # Browsers send an empty part when no file was chosen.
                    if key != self.upload_field or not value.filename:
                        continue
                    if upload is not None:
                        raise exceptions.ValidationException(
                            f"Only one file may be uploaded under '{key}'"
                        )
                    upload = value
                else:
                    payload[key] = value
            return payload, upload

        body = await request.body()
        if not body:
            return {}, None
        try:
            data = await request.json()
        except ValueError:
            raise exceptions.ValidationException("Malformed JSON body")
        if not isinstance(data, dict):
            raise exceptions.ValidationException("Request body must be a JSON object")
        return data, None

    # Additional utility methods for custom routes
    def add_custom_route(
        self,
        path: str,
        method: str,
        endpoint: Callable,
        **kwargs
    ) -> None:
        """Add a custom route to the router."""
        method = method.lower()
        router_method = getattr(self.router, method, None)

        if router_method:
            router_method(path, **kwargs)(endpoint)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")

    def get_router(self) -> APIRouter:
        """Get the FastAPI router instance."""
        return self.router
