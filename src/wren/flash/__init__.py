"""Flash messages carried across one redirect in a signed cookie."""

from wren.flash.codec import Flash, FlashCodec
from wren.flash.cookie import (
    FLASH_COOKIE,
    apply_flash_cookies,
    check_and_consume,
    set_if_needed,
)
from wren.flash.state import FlashState

__all__ = [
    "FLASH_COOKIE",
    "Flash",
    "FlashCodec",
    "FlashState",
    "apply_flash_cookies",
    "check_and_consume",
    "set_if_needed",
]
