"""Parsed snapshot of a loaded product page.

The SiteDriver captures the rendered HTML, the final URL, the page title
and the natural size of every image while the browser is still open.
Extractors only ever see this snapshot, so they can be exercised with
plain HTML fixtures.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Doctype

_INVISIBLE_TAGS = frozenset(["script", "style", "noscript", "template", "head", "title"])


def _squash(text: str) -> str:
    return " ".join(text.split())


@dataclass(frozen=True)
class ImageInfo:
    """An <img> element with its absolute source and rendered size."""

    src: str
    alt: str = ""
    width: int = 0
    height: int = 0

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class PageDocument:
    """DOM handle given to extractors."""

    html: str
    url: str
    title: str = ""
    # Absolute image src -> (naturalWidth, naturalHeight) measured in the browser
    image_sizes: Dict[str, Tuple[int, int]] = field(default_factory=dict)

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    @staticmethod
    def text_of(element: Optional[Tag]) -> str:
        """Whitespace-collapsed text content of an element."""
        if element is None:
            return ""
        return _squash(element.get_text(" "))

    def page_title(self) -> str:
        """Title reported by the browser, else the <title> element."""
        if self.title:
            return self.title.strip()
        title_tag = self.soup.find("title")
        return self.text_of(title_tag) if title_tag else ""

    def meta_content(self, key: str) -> str:
        """Content of a <meta property=...> or <meta name=...> tag."""
        meta = self.soup.find("meta", attrs={"property": key}) or self.soup.find(
            "meta", attrs={"name": key}
        )
        if meta is None:
            return ""
        return (meta.get("content") or "").strip()

    def visible_text(self) -> str:
        """Approximation of ``document.body.innerText``."""
        root = self.soup.body or self.soup
        parts = [
            text
            for text in root.find_all(string=True)
            if not isinstance(text, (Comment, Doctype))
            and text.parent is not None
            and text.parent.name not in _INVISIBLE_TAGS
        ]
        return _squash(" ".join(parts))

    def absolute_url(self, src: str) -> str:
        return urljoin(self.url, src.strip()) if src else ""

    def image_from(self, element: Tag) -> Optional[ImageInfo]:
        """Build ImageInfo for an <img> element (or the first <img> inside it)."""
        img = element if element.name == "img" else element.find("img")
        if img is None:
            return None

        raw_src = img.get("src") or img.get("data-src") or ""
        if not raw_src or raw_src.startswith("data:"):
            return None

        src = self.absolute_url(raw_src)
        width, height = self.image_sizes.get(src, (0, 0))
        if not width or not height:
            width = _parse_dimension(img.get("width"))
            height = _parse_dimension(img.get("height"))

        return ImageInfo(
            src=src,
            alt=(img.get("alt") or "").strip(),
            width=width,
            height=height,
        )

    def images(self) -> List[ImageInfo]:
        """All images on the page, in document order."""
        found = []
        for img in self.soup.find_all("img"):
            info = self.image_from(img)
            if info is not None:
                found.append(info)
        return found


def _parse_dimension(value) -> int:
    if not value:
        return 0
    digits = str(value).strip().lower().removesuffix("px")
    try:
        return int(float(digits))
    except ValueError:
        return 0
