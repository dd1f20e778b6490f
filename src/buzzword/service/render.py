"""Word-cloud rendering and upload to nostr.build.

Draws the ranking as an 800x800 PNG and uploads it with a NIP-98 signed
``Authorization`` header. Any failure raises RenderFailedError; the caller
treats that as fatal for the publish it belongs to.
"""

from __future__ import annotations

import asyncio
import base64
import io
import json
import logging
import random

import httpx

from ..core.exceptions import RenderFailedError
from ..nostr.event import KIND_HTTP_AUTH, Event
from ..nostr.keys import Signer

logger = logging.getLogger(__name__)

PALETTE = ["#1b1b1b", "#48484b", "#593aee", "#65cdfa", "#70d6bf"]
IMAGE_SIZE = 800


def _palette_color(word, font_size, position, orientation, random_state=None, **kwargs) -> str:
    rng = random_state or random.Random(0)
    return rng.choice(PALETTE)


def draw_png(frequencies: dict[str, int], font_path: str) -> bytes:
    """Render ``frequencies`` to PNG bytes. CPU-bound; run it off the loop."""
    from wordcloud import WordCloud

    cloud = WordCloud(
        font_path=font_path,
        width=IMAGE_SIZE,
        height=IMAGE_SIZE,
        max_font_size=100,
        min_font_size=10,
        background_color="white",
        color_func=_palette_color,
        prefer_horizontal=1.0,
        relative_scaling=1.0,
        random_state=0,
    )
    image = cloud.generate_from_frequencies(frequencies).to_image()
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def auth_header(signer: Signer, url: str, method: str) -> str:
    """NIP-98 HTTP auth: a signed kind-27235 event, base64 encoded."""
    event = Event(
        kind=KIND_HTTP_AUTH,
        tags=[["u", url], ["method", method]],
    )
    signer.sign(event)
    token = base64.b64encode(json.dumps(event.to_wire(), ensure_ascii=False).encode("utf-8"))
    return "Nostr " + token.decode("ascii")


class WordCloudRenderer:
    """Renders a ranking to an image and returns its hosted URL."""

    def __init__(
        self,
        signer: Signer,
        font_path: str,
        upload_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.signer = signer
        self.font_path = font_path
        self.upload_url = upload_url
        self.timeout = timeout
        self._client = client

    async def render(self, frequencies: dict[str, int]) -> str:
        try:
            png = await asyncio.to_thread(draw_png, frequencies, self.font_path)
        except (OSError, ValueError, ImportError) as e:
            raise RenderFailedError(f"word cloud drawing failed: {e}") from e
        return await self.upload(png)

    async def upload(self, png: bytes) -> str:
        headers = {"Authorization": auth_header(self.signer, self.upload_url, "POST")}
        files = {"file": ("wordcloud.png", png, "image/png")}
        try:
            if self._client is not None:
                response = await self._client.post(
                    self.upload_url, headers=headers, files=files, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self.upload_url, headers=headers, files=files, timeout=self.timeout
                    )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RenderFailedError(f"image upload failed: {e}") from e

        try:
            url = data["data"][0]["url"]
        except (KeyError, IndexError, TypeError) as e:
            raise RenderFailedError("upload response has no image URL", response=data) from e
        logger.info("Uploaded word cloud: %s", url)
        return url
