from .database import Base, engine
from .matching import match_action, match_resource
from .pages import DEFAULT_GLYPHS, GlyphTable, parse_pages
from .permissions import check_permission, has_permission
from .routes import router


def init_access_module() -> None:
    Base.metadata.create_all(bind=engine)


__all__ = [
    "DEFAULT_GLYPHS",
    "GlyphTable",
    "check_permission",
    "has_permission",
    "init_access_module",
    "match_action",
    "match_resource",
    "parse_pages",
    "router",
]
