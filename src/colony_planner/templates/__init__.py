"""Template store: static, tier-indexed component layouts."""

from .loader import load_bundled_template, load_template, parse_template
from .store import Template, TemplateStore

__all__ = ["Template", "TemplateStore", "load_bundled_template", "load_template", "parse_template"]
