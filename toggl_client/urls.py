from __future__ import annotations

import enum


class ResourceType(enum.Enum):
    CLIENTS = "clients"
    PROJECTS = "projects"
    TAGS = "tags"
    TIME_ENTRIES = "time_entries"

    def __str__(self) -> str:
        return self.value


def user_resource_url(resource_type: ResourceType) -> str:
    return f"/me/{resource_type}"


def resource_url(resource_type: ResourceType, wid: int) -> str:
    return f"/workspaces/{wid}/{resource_type}"


def resource_url_with_id(resource_type: ResourceType, wid: int, id: int) -> str:
    return f"{resource_url(resource_type, wid)}/{id}"
