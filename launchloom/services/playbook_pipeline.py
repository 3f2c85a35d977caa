"""End-to-end playbook production: content, then normalize, layout, emit.

The free tier never enters this pipeline beyond :func:`load_free_asset`; its
document is a static file returned byte-for-byte.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from datetime import date
from pathlib import Path
from typing import Optional

from ..schemas.playbooks import LaunchForm
from .content_cache import ContentCache, cache_enabled
from .fallback_content import fallback_content, fallback_enabled
from .layout import DocumentSpec, layout
from .llm_client import GenerationError, LLMClient
from .normalizer import normalize
from .pdf_emitter import emit_pdf
from .prompts import build_prompt
from .tiers import Tier

logger = logging.getLogger(__name__)

DEFAULT_FREE_ASSET_PATH = "public/reports/free-playbook.pdf"

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


class AssetNotFoundError(FileNotFoundError):
    """The free-tier document is missing from the asset store."""


def free_asset_path() -> Path:
    return Path(os.getenv("FREE_TIER_ASSET_PATH", DEFAULT_FREE_ASSET_PATH))


def load_free_asset(path: Optional[Path] = None) -> bytes:
    asset = Path(path) if path is not None else free_asset_path()
    if not asset.is_file():
        logger.error("free_asset_missing", extra={"path": str(asset)})
        raise AssetNotFoundError(str(asset))
    return asset.read_bytes()


def playbook_filename(product_name: str, tier) -> str:
    tier_value = tier.value if isinstance(tier, Tier) else str(tier)
    slug = _UNSAFE_FILENAME.sub("-", product_name).strip("-._") or "launch"
    return f"{slug}-{tier_value}-playbook.pdf"


def form_tier(form: LaunchForm) -> Tier:
    return form.tier


async def generate_content(
    form: LaunchForm,
    client: LLMClient,
    cache: Optional[ContentCache] = None,
) -> str:
    """Return raw generator text for ``form``, consulting the cache first.

    Upstream failures propagate as :class:`GenerationError` unless template
    fallback is switched on.
    """

    tier = form_tier(form)
    use_cache = cache is not None and cache_enabled()
    key = ContentCache.key_for(form.product_name, form.target_audience, tier.value) if use_cache else None
    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            logger.info("content_cache_hit", extra={"tier": tier.value})
            return cached

    try:
        content = await client.generate(build_prompt(form))
    except GenerationError as exc:
        if not fallback_enabled():
            raise
        logger.warning("content_fallback_used", extra={"tier": tier.value, "reason": str(exc)})
        return fallback_content(form.product_name, form.target_audience, tier)

    if use_cache:
        cache.set(key, content)
    return content


def render_playbook(raw: str, spec: DocumentSpec, *, compress: bool = True) -> bytes:
    """Synchronous core: normalize ``raw``, lay it out and emit the PDF."""

    blocks = normalize(raw)
    pages = layout(blocks, spec)
    return emit_pdf(pages, spec, compress=compress)


async def generate_playbook_pdf(
    form: LaunchForm,
    client: LLMClient,
    cache: Optional[ContentCache] = None,
    *,
    today: Optional[date] = None,
) -> bytes:
    tier = form_tier(form)
    raw = await generate_content(form, client, cache)
    spec = DocumentSpec(
        title=form.product_name,
        tier=tier,
        generated_on=today or date.today(),
        subtitle=form.target_audience,
    )
    pdf_bytes = await asyncio.to_thread(render_playbook, raw, spec)
    logger.info(
        "playbook_generated",
        extra={"tier": tier.value, "bytes": len(pdf_bytes), "days_to_launch": form.days_to_launch},
    )
    return pdf_bytes
