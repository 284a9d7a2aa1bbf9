"""Files and batch endpoints.

Each method is a single request/response call through the client's shared
retry/transport path; batch variants differ only in path prefix and auth.
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any

from kushrouter.surfaces import AuthMode
from kushrouter.types import Batch, BatchList, FileDeleted, FileList, FileObject

if TYPE_CHECKING:
    from kushrouter.client import KushRouter

DEFAULT_UPLOAD_FILENAME = "batch.jsonl"


class Files:
    """``/api/v1/files`` – upload and manage JSONL inputs for batches."""

    def __init__(self, client: KushRouter) -> None:
        self._client = client

    async def upload(
        self,
        content: str | bytes | IO[bytes],
        filename: str | None = None,
        purpose: str | None = None,
    ) -> FileObject:
        """Upload a file.

        Text content is sent as a JSON envelope ``{content, filename}``;
        bytes or a binary file object go out as multipart form data.
        """
        name = filename or DEFAULT_UPLOAD_FILENAME
        if isinstance(content, str):
            body: dict[str, Any] = {"content": content, "filename": name}
            if purpose:
                body["purpose"] = purpose
            data = await self._client._request_json("POST", "/api/v1/files", json=body)
        else:
            # read once so every retry attempt re-sends the full payload
            payload = content if isinstance(content, bytes) else content.read()
            form = {"purpose": purpose} if purpose else None
            data = await self._client._request_json(
                "POST", "/api/v1/files", files={"file": (name, payload)}, data=form,
            )
        return FileObject.from_dict(data)

    async def list(self) -> FileList:
        return FileList.from_dict(await self._client._request_json("GET", "/api/v1/files"))

    async def get(self, file_id: str) -> FileObject:
        return FileObject.from_dict(await self._client._request_json("GET", f"/api/v1/files/{file_id}"))

    async def content(self, file_id: str) -> str:
        response = await self._client._request("GET", f"/api/v1/files/{file_id}/content")
        return response.text

    async def delete(self, file_id: str) -> FileDeleted:
        data = await self._client._request_json("DELETE", f"/api/v1/files/{file_id}")
        return FileDeleted(id=data.get("id", file_id), deleted=bool(data.get("deleted")), object=data.get("object", "file"))


class Batches:
    """Batch jobs under one path prefix (unified, Anthropic or OpenAI)."""

    def __init__(self, client: KushRouter, prefix: str, auth_mode: AuthMode = AuthMode.API_KEY_HEADER) -> None:
        self._client = client
        self.prefix = prefix
        self.auth_mode = auth_mode

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        return await self._client._request_json(method, f"{self.prefix}{path}", auth_mode=self.auth_mode, **kwargs)

    async def create(self, request: dict[str, Any]) -> Batch:
        return Batch.from_dict(await self._json("POST", "", json=request))

    async def list(self, limit: int | None = None) -> BatchList:
        params = {"limit": str(limit)} if limit else None
        return BatchList.from_dict(await self._json("GET", "", params=params))

    async def get(self, batch_id: str) -> Batch:
        return Batch.from_dict(await self._json("GET", f"/{batch_id}"))

    async def cancel(self, batch_id: str) -> Batch:
        return Batch.from_dict(await self._json("POST", f"/{batch_id}/cancel"))

    async def results(self, batch_id: str) -> Any:
        return await self._json("GET", f"/{batch_id}/results")

    async def export(self, batch_id: str) -> bytes:
        response = await self._client._request("GET", f"{self.prefix}/{batch_id}/export", auth_mode=self.auth_mode)
        return response.content


class UnifiedBatches(Batches):
    def __init__(self, client: KushRouter) -> None:
        super().__init__(client, "/api/v1/batches")

    async def create_from_file(
        self,
        file_id: str,
        metadata: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
    ) -> Batch:
        request: dict[str, Any] = {"input_file_id": file_id}
        if metadata is not None:
            request["metadata"] = metadata
        if settings is not None:
            request["settings"] = settings
        return await self.create(request)


class AnthropicBatches(Batches):
    def __init__(self, client: KushRouter) -> None:
        super().__init__(client, "/api/anthropic/batches")


class OpenAIBatches(Batches):
    def __init__(self, client: KushRouter) -> None:
        super().__init__(client, "/api/openai/batches", AuthMode.BEARER_TOKEN)

    async def create_from_file(
        self,
        file_id: str,
        endpoint: str = "/v1/chat/completions",
        completion_window: str = "24h",
        metadata: dict[str, Any] | None = None,
    ) -> Batch:
        request: dict[str, Any] = {
            "input_file_id": file_id,
            "endpoint": endpoint,
            "completion_window": completion_window,
        }
        if metadata is not None:
            request["metadata"] = metadata
        return await self.create(request)


class ProviderNamespace:
    """``client.anthropic`` / ``client.openai`` – provider-compatible batch APIs."""

    def __init__(self, batches: Batches) -> None:
        self.batches = batches
