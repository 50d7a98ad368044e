# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, List, Optional

from app.infra.ylogger import ylogger

CREATED_MESSAGE = "user has been created successfully"


class UserUsecase:
    """ 用户列表(内存，演示用) 生产环境替换为数据库 """

    def __init__(self) -> None:
        self._users: List[Dict[str, Any]] = []
        # 单写者：并发 create 串行化
        self._write_lock = asyncio.Lock()

    def find(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._users)

    async def create(self, user: Dict[str, Any]) -> str:
        async with self._write_lock:
            self._users.append(copy.deepcopy(user))
            ylogger.info("user created: id=%s total=%s", user.get("id"), len(self._users))
        return CREATED_MESSAGE

    def find_one(self, user_id: int) -> Optional[Dict[str, Any]]:
        for user in self._users:
            if user.get("id") == user_id:
                return copy.deepcopy(user)
        return None
