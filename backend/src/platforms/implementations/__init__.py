"""
Platform adapter handles.

Each handle identifies one platform and carries its API base URL. Live API
calls are owned by the catalog sync process.
"""

from ..ports import EcommercePlatform, PlatformAdapterPort


class SamsClubAdapter(PlatformAdapterPort):
    platform = EcommercePlatform.SAMS_CLUB
    platform_name = "山姆会员商店"


class HemaAdapter(PlatformAdapterPort):
    platform = EcommercePlatform.HEMA
    platform_name = "盒马鲜生"


class DingdongAdapter(PlatformAdapterPort):
    platform = EcommercePlatform.DINGDONG
    platform_name = "叮咚买菜"


__all__ = ["SamsClubAdapter", "HemaAdapter", "DingdongAdapter"]
