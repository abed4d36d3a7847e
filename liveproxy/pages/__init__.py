"""
Static Pages Module
"""

from liveproxy.pages.config_page import render_config_page

__all__ = ["render_config_page"]
