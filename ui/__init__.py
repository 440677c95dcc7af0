"""用户界面模块"""

from ui.status import get_status_info

__all__ = ["get_status_info"]
