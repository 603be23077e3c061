"""Panel controllers on top of FastAPI routes.

A controller groups the endpoints of one router. Each request gets its own
controller instance whose action is the endpoint name; once the endpoint has
produced its response the controller's behaviours run (the audit behaviour
writes the audit log).

    class UsersController(BaseController):
        module = Module("users", "Users")
        action_descriptions = {"list_users": "view users"}

    router = UsersController.router()

    @router.get("")
    def list_users(controller: BaseController = Depends(get_controller)): ...
"""
from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, List, Optional, Type

from fastapi import APIRouter, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from gmpanel.audit import (
    Audit,
    AuditBehavior,
    AuditContext,
    Module,
    RequestInfo,
    ResponseInfo,
    UserIdentity,
    read_body_params,
)
from gmpanel.core.config import settings
from gmpanel.core.i18n import BACKEND, Translator

logger = logging.getLogger(__name__)

AfterRunHook = Callable[[Any, str], Any]


class BaseController:
    module: ClassVar[Optional[Module]] = None
    # False switches the audit behaviour off, True/None defer to the audit service
    enable_audit: ClassVar[Optional[bool]] = None
    # action name -> message describing it in audit comments
    action_descriptions: ClassVar[Dict[str, str]] = {}

    def __init__(self, request: Request, action: str) -> None:
        self.request = request
        self.action = action
        self.last_data_model: Any = None
        self.body_params: Dict[str, Any] = {}
        self._after_run: List[AfterRunHook] = []

    @classmethod
    def router(cls, **kwargs: Any) -> APIRouter:
        return APIRouter(route_class=controller_route(cls), **kwargs)

    def behaviors(self) -> Dict[str, Any]:
        return {"audit": AuditBehavior(allowed="*", enabled=self.enable_audit)}

    @property
    def identity(self) -> Optional[UserIdentity]:
        return getattr(self.request.state, "identity", None)

    @property
    def translator(self) -> Translator:
        translator = getattr(self.request.app.state, "translator", None)
        return translator if translator is not None else Translator()

    def use_data_model(self, model: Any) -> Any:
        self.last_data_model = model
        return model

    def translate_action(self, translator: Translator) -> Optional[str]:
        description = self.action_descriptions.get(self.action)
        if not description:
            return None
        category = self.module.id if self.module else BACKEND
        if translator.has_category(category):
            return translator.translate(description, category=category)
        return translator.translate(description)

    def on_after_run(self, hook: AfterRunHook) -> None:
        self._after_run.append(hook)

    def off_after_run(self, hook: AfterRunHook) -> None:
        if hook in self._after_run:
            self._after_run.remove(hook)

    def create_audit(self, response: Response) -> Audit:
        context = AuditContext(
            request=RequestInfo.from_request(self.request, self.body_params),
            response=ResponseInfo.from_response(response),
            identity=self.identity,
            controller=self,
        )
        audit = Audit.from_settings(settings, context=context, translator=self.translator)
        storage = getattr(self.request.app.state, "audit_storage", None)
        if storage is not None:
            audit.set_storage(storage)
        return audit

    def after_run(self) -> None:
        for hook in list(self._after_run):
            hook(self, self.action)

    def finish(self, response: Response) -> None:
        audit = self.create_audit(response)
        behaviors = list(self.behaviors().values())
        for behavior in behaviors:
            behavior.init(audit)
            behavior.attach(self)
        try:
            self.after_run()
        finally:
            for behavior in behaviors:
                behavior.detach()


class ControllerRoute(APIRoute):
    controller_class: ClassVar[Type[BaseController]] = BaseController

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()
        controller_class = self.controller_class
        action = self.name

        async def controller_handler(request: Request) -> Response:
            controller = controller_class(request, action)
            request.state.controller = controller
            try:
                response = await handler(request)
            except StarletteHTTPException as exc:
                logger.debug(
                    "action failed controller=%s action=%s status=%s",
                    controller_class.__name__,
                    action,
                    exc.status_code,
                )
                response = await http_exception_handler(request, exc)
            controller.body_params = await read_body_params(request)
            await run_in_threadpool(controller.finish, response)
            return response

        return controller_handler


def controller_route(controller_class: Type[BaseController]) -> Type[ControllerRoute]:
    return type(
        f"{controller_class.__name__}Route",
        (ControllerRoute,),
        {"controller_class": controller_class},
    )


def get_controller(request: Request) -> BaseController:
    return request.state.controller
