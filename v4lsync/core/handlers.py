"""Get/Set request handlers bypassing reconciliation."""

from __future__ import annotations

from v4lsync.core.engine import SyncEngine
from v4lsync.core.model import GetRequest, GetResponse, SetRequest, SetResponse


class RequestHandlers:
    def __init__(self, engine: SyncEngine) -> None:
        self.engine = engine

    def get(self, request: GetRequest) -> GetResponse:
        return GetResponse(result=self.engine.adapter.read(request.name))

    def set(self, request: SetRequest) -> SetResponse:
        return SetResponse(success=self.engine.write(request.name, request.value))
