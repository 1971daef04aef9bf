"""Placeholder artwork returned when no image provider succeeds."""
import base64
from xml.sax.saxutils import escape


_SVG_TEMPLATE = """<svg width="1024" height="1024" viewBox="0 0 1024 1024" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="bg" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:#ff1493;stop-opacity:1" />
      <stop offset="50%" style="stop-color:#e91e63;stop-opacity:1" />
      <stop offset="100%" style="stop-color:#d946ef;stop-opacity:1" />
    </linearGradient>
  </defs>
  <rect width="1024" height="1024" fill="url(#bg)"/>
  <circle cx="512" cy="300" r="80" fill="rgba(255,255,255,0.2)"/>
  <circle cx="300" cy="500" r="40" fill="rgba(255,255,255,0.15)"/>
  <circle cx="700" cy="600" r="60" fill="rgba(255,255,255,0.1)"/>
  <text x="512" y="420" font-family="Arial, sans-serif" font-size="44" font-weight="bold" fill="#ffffff" text-anchor="middle">{title}</text>
  <text x="512" y="480" font-family="Arial, sans-serif" font-size="26" fill="rgba(255,255,255,0.9)" text-anchor="middle">{message}</text>
  <text x="512" y="650" font-family="Arial, sans-serif" font-size="18" fill="rgba(255,255,255,0.7)" text-anchor="middle">{excerpt}</text>
</svg>"""

EXCERPT_WORDS = 8
EXCERPT_CHARS = 60


def excerpt(description: str) -> str:
    words = " ".join(description.split()[:EXCERPT_WORDS])
    if len(words) > EXCERPT_CHARS:
        words = words[:EXCERPT_CHARS - 3].rstrip() + "..."
    return words


def render_placeholder_svg(message: str, description: str, title: str = "Image Unavailable") -> str:
    return _SVG_TEMPLATE.format(
        title=escape(title),
        message=escape(message),
        excerpt=escape(excerpt(description)),
    )


def placeholder_data_uri(message: str, description: str) -> str:
    """Render the placeholder as a base64 SVG data URI. Same input, same output."""
    svg = render_placeholder_svg(message, description)
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
