"""Pure rendering of the form state to an HTML fragment.

:func:`render` has no side effects: the same :class:`FormState` always
produces the same markup.  All user- and model-supplied text is escaped.
"""

from __future__ import annotations

from html import escape

from chromatica.api.models import PaletteItem, PaletteResponse

from .models import FormState

IDLE_TEXT = "Upload your image and enter a mood vibe to let Chromatica build your palette."
LOADING_TEXT = "Vibe Checking..."


def _render_item(item: PaletteItem) -> str:
    texture = (
        f'<p class="chromatica-texture">Texture: {escape(item.texture)}</p>' if item.texture else ""
    )
    return (
        '<div class="chromatica-item">'
        f'<div class="chromatica-swatch" style="background-color: {escape(item.hex_code)};"></div>'
        f'<p class="chromatica-product"><strong>{escape(item.product_type)}</strong></p>'
        f'<p class="chromatica-color">{escape(item.vibe_color)} ({escape(item.hex_code)})</p>'
        f"{texture}"
        f'<p class="chromatica-tip"><em>Tip:</em> {escape(item.application_tip)}</p>'
        "</div>"
    )


def _render_palette(palette: PaletteResponse, mood_vibe: str) -> str:
    items = "".join(_render_item(item) for item in palette.palette_items)
    return (
        '<div class="chromatica-result">'
        f'<h2 class="chromatica-title">Vibe Result: {escape(mood_vibe.upper())}</h2>'
        f'<p class="chromatica-notes"><strong>Chromatica\'s Notes:</strong> '
        f"{escape(palette.stylist_notes)}</p>"
        f'<p class="chromatica-undertone"><strong>Detected Undertone:</strong> '
        f"{escape(palette.user_undertone)}</p>"
        f'<div class="chromatica-grid">{items}</div>'
        "</div>"
    )


def render(state: FormState) -> str:
    """Render a form state as HTML.

    Args:
        state: Current form state.

    Returns:
        An HTML fragment for the result panel.
    """
    if state.status == "loading":
        return f'<p class="chromatica-loading">{LOADING_TEXT}</p>'

    if state.status == "error":
        return f'<p class="chromatica-error">Error: {escape(state.message or "")}</p>'

    if state.status == "success" and state.palette is not None:
        return _render_palette(state.palette, state.mood_vibe or "")

    return f'<p class="chromatica-idle">{IDLE_TEXT}</p>'
