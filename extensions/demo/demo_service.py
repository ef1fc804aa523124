"""
Demo Extension - 示例扩展，展示扩展的 info 格式与启动流程。
"""
from typing import Optional

from fastapi import APIRouter

from core.app_context import AppContext
from core.dependencies import ResponderDep
from core.interface import ExtensionServiceProvider
from extensions.demo.commands import TestCommand


class DemoService(ExtensionServiceProvider):
    """
    示例扩展。
    启动时注册 ``demo:test`` 命令，并提供 /admin/demo/settings 接口。
    """

    info = {
        "name": "Demo",
        "title": "示例扩展",
        "introduce": "示例扩展描述",
        "author": "deatil",
        "authorsite": "http://github.com/deatil",  # 选填
        "authoremail": "deatil@github.com",
        "version": "1.0.1",
        "adaptation": "1.0.*",
        "require": {
            # "SignCert": "1.0.0"
        },  # 选填
        "config": [  # 配置，选填
            {
                "name": "atext",
                "title": "文本",
                "type": "text",
                "value": "文本",
                "require": "1",
                "description": "设置内容文本",
            },
            {
                "name": "atextarea",
                "title": "文本框",
                "type": "textarea",
                "value": "文本框",
                "require": "1",
                "description": "设置内容文本框",
            },
            {
                "name": "aradio",
                "title": "单选",
                "type": "radio",
                "options": {
                    "1": "单选1",
                    "2": "单选2",
                    "3": "单选3",
                },
                "value": "1",
                "require": "1",
                "description": "设置内容单选",
            },
            {
                "name": "acheckbox",
                "title": "多选",
                "type": "checkbox",
                "options": {
                    "1": "多选1",
                    "2": "多选2",
                    "3": "多选3",
                },
                "value": "1",
                "require": "1",
                "description": "设置内容多选",
            },
            {
                "name": "aselect",
                "title": "下拉",
                "type": "select",
                "options": {
                    "1": "下拉1",
                    "2": "下拉2",
                    "3": "下拉3",
                },
                "value": "1",
                "require": "1",  # 1-必填
                "description": "设置内容下拉",
            },
            {
                "name": "aswitch",
                "title": "开关",
                "type": "switch",
                "value": "1",
                "require": "1",
                "description": "设置内容开关",
            },
        ],
    }

    def start(self, context: AppContext) -> None:
        self.commands([
            TestCommand,
        ])
        context.log_event("Demo 扩展已启动", "EXTENSION")

    def get_api_router(self) -> Optional[APIRouter]:
        router = APIRouter(prefix="/admin/demo", tags=["Demo Extension"])
        manifest = self.get_manifest()

        @router.get("/settings")
        async def settings(responder: ResponderDep):
            return responder.success(data={
                "extension": manifest.name,
                "settings": manifest.default_config(),
            })

        return router
