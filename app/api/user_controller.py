# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from app.application.user.usecase import UserUsecase
from app.domain.schemas import CreateUserDto
from app.pipeline.pipes import ParamSource, email_pipe, parse_int_pipe, validation_pipe
from app.pipeline.routing import Controller, route


def build_user_controller(uc: UserUsecase) -> Controller:
    def find():
        return uc.find()

    async def create(user: dict):
        return await uc.create(user)

    def find_one(id: int):  # noqa: A002
        return uc.find_one(id)

    def check_email(email: str):
        return email

    controller = Controller("/user", name="UserController")
    controller.add(
        route("GET", "/").handle(find),
        route("POST", "/").with_pipe("user", ParamSource.BODY, validation_pipe(CreateUserDto)).handle(create),
        route("POST", "/email").with_pipe("email", ParamSource.BODY, email_pipe, field_name="email").handle(check_email),
        route("GET", "/:id").with_pipe("id", ParamSource.PATH, parse_int_pipe).handle(find_one),
    )
    return controller
