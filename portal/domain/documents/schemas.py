"""Document webhook schemas"""

from typing import Optional

from pydantic import BaseModel


class DocumentData(BaseModel):
    name: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    folder: Optional[str] = None
    tags: Optional[list[str]] = None


class DocumentFilters(BaseModel):
    folder: Optional[str] = None
    file_type: Optional[str] = None
    search: Optional[str] = None


class DocumentWebhookRequest(BaseModel):
    action: Optional[str] = None
    user_id: Optional[int] = None
    document_id: Optional[int] = None
    data: Optional[DocumentData] = None
    filters: Optional[DocumentFilters] = None
