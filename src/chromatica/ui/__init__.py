"""Client side of the Chromatica palette service.

- client: ``encode_image`` and the ``httpx``-based ``PaletteClient``
- models: ``FormState`` snapshots (idle, loading, error, success)
- validation: local checks that block incomplete submissions
- controller: ``FormController`` driving one submission through its states
- render: pure ``render(state)`` to HTML
- handlers / app: the Gradio front-end
"""

from .client import EncodingError, PaletteClient, RequestFailed, encode_image
from .controller import FormController
from .models import FormState
from .render import render

__all__ = [
    "EncodingError",
    "FormController",
    "FormState",
    "PaletteClient",
    "RequestFailed",
    "encode_image",
    "render",
]
