"""Meme-of-the-day catalog."""
import random

from schemas.market import Meme

MEME_CATALOG = [
    Meme(
        id="crypto-pain",
        title="Crypto pain",
        img="https://img-9gag-fun.9cache.com/photo/ae9qODm_700bwp.webp",
    ),
    Meme(
        id="chart-stare",
        title="Staring at the chart",
        img="https://img-9gag-fun.9cache.com/photo/a0eGWRL_700bwp.webp",
    ),
    Meme(
        id="iou",
        title="You have IOU",
        img="https://img-9gag-fun.9cache.com/photo/avyVedd_460swp.webp",
    ),
    Meme(
        id="volatility",
        title="Market volatility",
        img="https://img-9gag-fun.9cache.com/photo/a2vAX8O_460swp.webp",
    ),
    Meme(
        id="get-rich",
        title="People still trying to get rich from stocks be like in 2026",
        img="https://i.imgflip.com/s6dhc.jpg",
    ),
]


def pick_meme(
    exclude: str | None = None,
    rng: random.Random | None = None,
    catalog: list[Meme] = MEME_CATALOG,
) -> Meme:
    """
    Pick a random meme.

    When exclude names a catalog entry (the meme currently on screen), that
    entry is skipped unless it is the only one.
    """
    rng = rng or random.Random()
    candidates = [m for m in catalog if m.id != exclude] or catalog
    return rng.choice(candidates)
