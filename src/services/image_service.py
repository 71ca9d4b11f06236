import hashlib
from html import escape

PLACEHOLDER_LABEL = "Product Image"
ERROR_LABEL = "Image Unavailable"


def generate_placeholder_svg(label: str, *, muted: bool = False) -> bytes:
    """Generate an SVG placeholder with the label's initials on a colour derived from it."""
    words = label.split()[:2]
    initials = "".join(w[0].upper() for w in words if w) or "?"
    fill = "9ca3af" if muted else hashlib.sha256(label.encode()).hexdigest()[:6]
    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="300" height="200" viewBox="0 0 300 200">
  <rect width="300" height="200" fill="#{fill}"/>
  <text x="150" y="115" text-anchor="middle" font-family="Arial,sans-serif"
        font-size="64" font-weight="bold" fill="white">{escape(initials)}</text>
  <text x="150" y="180" text-anchor="middle" font-family="Arial,sans-serif"
        font-size="14" fill="white">{escape(label)}</text>
</svg>"""
    return svg.encode("utf-8")
