from pydantic import BaseModel, ConfigDict, Field


class MenuNode(BaseModel):
    title: str
    page_id: str
    children: list["MenuNode"] = Field(default_factory=list)


class ParsedPages(BaseModel):
    flat_identifiers: list[str] = Field(default_factory=list)
    tree: list[MenuNode] = Field(default_factory=list)


class PermissionRow(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_name: str
    resource: str
    action: str
    is_allowed: bool = True


class RolePermissionOut(PermissionRow):
    id: int


class RolePermissionUpsertRequest(BaseModel):
    role_name: str = Field(min_length=1, max_length=64)
    resource: str = Field(min_length=1, max_length=255)
    action: str = Field(min_length=1, max_length=64)
    is_allowed: bool = True


class UserPagesUpdateRequest(BaseModel):
    pages: str


class PagesPreviewRequest(BaseModel):
    pages: str | None = None


class PermissionCheckResponse(BaseModel):
    resource: str
    action: str
    allowed: bool


class UserProfile(BaseModel):
    id: int
    auth_id: str | None = None
    username: str = ""
    nama: str = "User"
    role: str = ""
    roles: list[str] = Field(default_factory=list)
    is_admin: bool = False
    pages: str = ""
    page_ids: list[str] = Field(default_factory=list)
    pages_tree: list[MenuNode] = Field(default_factory=list)
    aktif: bool = True
    permissions: list[PermissionRow] = Field(default_factory=list)
    permissions_loaded: bool = False
