"""Metadata for seo_auditor."""

__all__ = [
    "__title__",
    "__version__",
    "__description__",
    "__credits__",
    "__requires_python__",
]

__title__ = "seo_auditor"
__version__ = "0.1.0"
__description__ = (
    "Single-page SEO auditor: renders a page, scores it across weighted categories "
    "and produces a grade with prioritized recommendations."
)
__credits__ = [
    {"name": "Matthew D. Martin", "email": "matthewdeanmartin@users.noreply.github.com"}
]
__requires_python__ = ">=3.9"
