"""public-api: canonical public API listings and diffs from rustdoc JSON."""

from public_api.engine.diff import ChangedPublicItem, PublicItemsDiff
from public_api.engine.items import PublicItem
from public_api.engine.pipeline import diff_public_apis, public_api_from_rustdoc_json_str
from public_api.rustdoc import RustdocJsonError

__version__ = "0.1.0"

__all__ = [
    "ChangedPublicItem",
    "PublicItem",
    "PublicItemsDiff",
    "RustdocJsonError",
    "__version__",
    "diff_public_apis",
    "public_api_from_rustdoc_json_str",
]
