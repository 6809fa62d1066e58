"""Static site generator for the language concepts notes."""

from conceptsite.config import SiteConfig, load_site_config
from conceptsite.menu import MenuEntry, normalize_path, render_menu

__all__ = ["MenuEntry", "SiteConfig", "load_site_config", "normalize_path", "render_menu"]
