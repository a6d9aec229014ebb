"""Banner art for generated articles.

Two external calls: a chat model writes a short, text-free visual description,
then the image endpoint renders it. Either step degrades to a fallback
(stock description / placeholder banner) so a failed image never costs the
article itself.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests
from langchain_core.prompts import ChatPromptTemplate
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from magazine.llm.factory import message_text
from magazine.models import AuthorProfile, BannerImage
from magazine.utils import to_iso, utc_now

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://via.placeholder.com/1024x512/4F46E5/FFFFFF?text=AI+Article+Banner"
NO_TEXT_SUFFIX = (
    "Important: Create this image with absolutely NO TEXT, NO LETTERS, NO WORDS, NO NUMBERS, "
    "NO SYMBOLS, NO CODE, and NO READABLE CHARACTERS of any kind. Pure visual elements only."
)

_DESCRIPTION_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You are an expert visual designer who creates compelling banner image descriptions for tech articles.",
        ),
        (
            "user",
            """Create a concise image description for a banner image for this AI/tech article:

Title: "{title}"
Author expertise: {specialization}

The image should be:
- Professional and modern
- Related to AI, technology, or software development
- Suitable as a blog article banner
- Clean and minimalist design
- High contrast and readable
- Abstract or symbolic representation of the topic
- Focus on visual elements like geometric shapes, gradients, circuits, or tech patterns

IMPORTANT: The image must be completely text-free. Do NOT include any:
- Letters, words, or text of any kind
- Numbers or symbols
- Code snippets or programming text
- Brand names or logos
- Readable characters or typography

Describe the image in 1-2 sentences, focusing purely on visual elements, colors, shapes, and composition
without any textual elements.""",
        ),
    ]
)


def fallback_description(author: AuthorProfile) -> str:
    return (
        "A modern, minimalist banner featuring abstract geometric shapes in blue and purple gradients, "
        f"representing {author.specialization.lower()} and artificial intelligence concepts. "
        "No text, letters, or words."
    )


def generate_image_description(title: str, author: AuthorProfile, *, llm: Any) -> str:
    try:
        messages = _DESCRIPTION_PROMPT.format_messages(title=title, specialization=author.specialization)
        description = message_text(llm.invoke(messages))
    except Exception as e:  # noqa: BLE001
        logger.error("Error generating image description: %s", e)
        return fallback_description(author)
    return description or fallback_description(author)


def generate_banner_image(
    description: str,
    article_id: str,
    *,
    client: Any,
    model: str = "dall-e-2",
    size: str = "1024x1024",
    now: datetime | None = None,
) -> BannerImage:
    """Render the banner; on failure return a placeholder carrying the error."""
    stamp = to_iso(now or utc_now())
    try:
        response = client.images.generate(
            model=model,
            prompt=f"{description}. {NO_TEXT_SUFFIX}",
            size=size,
            n=1,
        )
        url = response.data[0].url
        if not url:
            raise ValueError("image response contained no URL")
    except Exception as e:  # noqa: BLE001
        logger.error("Error generating banner image for %s: %s", article_id, e)
        return BannerImage(
            url=PLACEHOLDER_URL,
            description=description,
            generated_at=stamp,
            model="placeholder",
            error=str(e),
        )
    return BannerImage(url=url, description=description, generated_at=stamp, model=model)


def mock_banner(title: str, *, now: datetime | None = None) -> BannerImage:
    text = quote(title[:30], safe="!'()*-._~")
    return BannerImage(
        url=f"https://via.placeholder.com/1024x512/4F46E5/FFFFFF?text={text}",
        description=f"Research-based article banner for: {title}",
        generated_at=to_iso(now or utc_now()),
        model="mock",
    )


def get_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=3,
        read=3,
        connect=3,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def download_banner(
    banner: BannerImage,
    dest: Path,
    *,
    public_dir: Path,
    session: requests.Session | None = None,
) -> BannerImage:
    """Persist a generated banner locally (image URLs from the API expire).

    Placeholder/mock banners are left alone. A failed download is logged and the
    remote URL kept.
    """
    if banner.model in {"placeholder", "mock"}:
        return banner
    session = session or get_session()
    try:
        response = session.get(banner.url, stream=True, timeout=30)
        response.raise_for_status()
        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(dest, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)
    except (requests.RequestException, OSError) as e:
        logger.error("Error downloading banner %s: %s", banner.url, e)
        dest.unlink(missing_ok=True)
        return banner
    banner.local_path = "/" + dest.relative_to(public_dir).as_posix()
    return banner
