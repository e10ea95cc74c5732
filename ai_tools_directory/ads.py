"""AdSense placements."""

from typing import Optional

from fasthtml.common import Div
from fasthtml.common import Ins
from fasthtml.common import Script

from .config import ADSENSE_CLIENT
from .config import ADSENSE_SLOTS

ADSENSE_SRC = "https://pagead2.googlesyndication.com/pagead/js/adsbygoogle.js"


def adsense_enabled() -> bool:
    return bool(ADSENSE_CLIENT)


def adsense_loader():
    """Loader script for the page head, or None when ads are off."""
    if not adsense_enabled():
        return None
    return Script(src=f"{ADSENSE_SRC}?client={ADSENSE_CLIENT}", crossorigin="anonymous", _async=True)


def ad_slot(placement: str, ad_format: str = "auto", full_width_responsive: bool = True) -> Optional[Div]:
    """An ad unit for a named placement. Nothing is rendered when ads are off or the slot is unset."""
    slot = ADSENSE_SLOTS.get(placement)
    if not adsense_enabled() or not slot:
        return None
    return Div(
        Ins(
            _class="adsbygoogle",
            style="display:block",
            **{
                "data-ad-client": ADSENSE_CLIENT,
                "data-ad-slot": slot,
                "data-ad-format": ad_format,
                "data-full-width-responsive": "true" if full_width_responsive else "false",
            },
        ),
        Script("(window.adsbygoogle = window.adsbygoogle || []).push({});"),
        _class="ad-slot",
    )
