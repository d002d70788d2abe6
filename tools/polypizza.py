"""Poly Pizza tools: get_model, get_list, search_models, search_models_by_keyword, get_user."""

from __future__ import annotations

from tools.base import BaseTool, ToolArguments, format_number, path_segment, with_query

CATEGORY_DESCRIPTION = (
    "Filter by category (0-11): 0=Food & Drink, 1=Clutter, 2=Weapons, 3=Transport, "
    "4=Furniture & Decor, 5=Objects, 6=Nature, 7=Animals, 8=Buildings/Architecture, "
    "9=People & Characters, 10=Scenes & Levels, 11=Other"
)
LICENSE_DESCRIPTION = "Filter by license (e.g., CC0, CC-BY, CC-BY-SA)"
MAX_SEARCH_LIMIT = 32


def _search_properties() -> dict:
    return {
        "category": {"type": "string", "description": CATEGORY_DESCRIPTION},
        "license": {"type": "string", "description": LICENSE_DESCRIPTION},
        "animated": {"type": "boolean", "description": "Filter by animation status"},
        "limit": {
            "type": "number",
            "description": f"Maximum number of results (max {MAX_SEARCH_LIMIT})",
            "maximum": MAX_SEARCH_LIMIT,
        },
        "page": {"type": "number", "description": "Page number for pagination"},
    }


def _paging(limit: int | float | None, page: int | float | None) -> list[tuple[str, str]]:
    params = []
    # Falsy values (None, 0) are left out, as upstream treats them as "default"
    if limit:
        params.append(("limit", format_number(limit)))
    if page:
        params.append(("page", format_number(page)))
    return params


# ── Argument records ─────────────────────────────────────────────────────────

class IdArguments(ToolArguments):
    id: str


class SearchArguments(ToolArguments):
    category: str | None = None
    license: str | None = None
    animated: bool | None = None
    limit: int | float | None = None
    page: int | float | None = None

    def query(self) -> list[tuple[str, str]]:
        params = []
        if self.category:
            params.append(("category", self.category))
        if self.license:
            params.append(("license", self.license))
        if self.animated is not None:
            params.append(("animated", "true" if self.animated else "false"))
        return params + _paging(self.limit, self.page)


class KeywordSearchArguments(SearchArguments):
    keyword: str


class UserArguments(ToolArguments):
    username: str
    limit: int | float | None = None
    page: int | float | None = None


# ── Tools ────────────────────────────────────────────────────────────────────

class GetModelTool(BaseTool):
    name = "get_model"
    description = "Retrieve a single 3D model by its ID"
    arguments = IdArguments

    def input_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The unique identifier of the model"},
            },
            "required": ["id"],
        }

    def endpoint(self, args: IdArguments) -> str:
        return f"/model/{path_segment(args.id)}"


class GetListTool(BaseTool):
    name = "get_list"
    description = "Fetch all models within a curated collection/list by its ID"
    arguments = IdArguments

    def input_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The unique identifier of the list"},
            },
            "required": ["id"],
        }

    def endpoint(self, args: IdArguments) -> str:
        return f"/list/{path_segment(args.id)}"


class SearchModelsTool(BaseTool):
    name = "search_models"
    description = (
        "Search for 3D models using filters (category, license, animated status). "
        "At least one filter is required."
    )
    arguments = SearchArguments

    def input_schema(self) -> dict:
        return {"type": "object", "properties": _search_properties()}

    def endpoint(self, args: SearchArguments) -> str:
        return with_query("/search", args.query())


class SearchModelsByKeywordTool(BaseTool):
    name = "search_models_by_keyword"
    description = "Search for 3D models by keyword with optional filters"
    arguments = KeywordSearchArguments

    def input_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "description": "Search keyword (will be URL-encoded)",
                },
                **_search_properties(),
            },
            "required": ["keyword"],
        }

    def endpoint(self, args: KeywordSearchArguments) -> str:
        return with_query(f"/search/{path_segment(args.keyword)}", args.query())


class GetUserTool(BaseTool):
    name = "get_user"
    description = "Retrieve all models and lists created by a specific user"
    arguments = UserArguments

    def input_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "username": {"type": "string", "description": "The username to look up"},
                "limit": {"type": "number", "description": "Maximum number of results"},
                "page": {"type": "number", "description": "Page number for pagination"},
            },
            "required": ["username"],
        }

    def endpoint(self, args: UserArguments) -> str:
        return with_query(f"/user/{path_segment(args.username)}", _paging(args.limit, args.page))


POLYPIZZA_TOOLS: tuple[type[BaseTool], ...] = (
    GetModelTool,
    GetListTool,
    SearchModelsTool,
    SearchModelsByKeywordTool,
    GetUserTool,
)
