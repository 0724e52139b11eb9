"""Gradio UI for the Chromatica palette service."""

import logging

import gradio as gr

from chromatica.core.config import config

from .client import PaletteClient
from .controller import FormController
from .handlers import SUBMIT_LABEL, make_generate_handler
from .models import FormState
from .render import render

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CUSTOM_CSS = """
.chromatica-error { color: red; text-align: center; margin-top: 15px; }
.chromatica-result { margin-top: 20px; padding: 20px; border: 2px solid #FF69B4;
    border-radius: 8px; background-color: #FFF0F5; }
.chromatica-title { color: #8A2BE2; border-bottom: 2px solid #FFC0CB; padding-bottom: 10px; }
.chromatica-notes { font-style: italic; }
.chromatica-grid { display: grid; grid-template-columns: repeat(3, 1fr); gap: 20px;
    margin-top: 20px; }
.chromatica-item { text-align: center; padding: 10px; border: 1px dashed #FFC0CB;
    border-radius: 6px; }
.chromatica-swatch { width: 100%; height: 80px; border-radius: 4px; margin-bottom: 10px;
    border: 1px solid #333; }
"""


def create_ui(client: PaletteClient | None = None) -> tuple[gr.Blocks, str]:
    """Create the Gradio palette form.

    Args:
        client: Palette API client.  Defaults to one built from the global
            config (``CHROMATICA_API_BASE_URL``).

    Returns:
        Tuple of (Gradio Blocks app, custom CSS string)
    """
    controller = FormController(client or PaletteClient.from_config(config))
    generate_palette = make_generate_handler(controller)

    app = gr.Blocks(title="The Vibe Checkr")

    with app:
        gr.Markdown(
            """
            # 💅 The Vibe Checkr 🎨
            ### Let Chromatica, your AI Stylist, generate a palette based on your mood.
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                image_input = gr.Image(
                    label="1. Upload your image (Selfie or Inspiration)",
                    type="filepath",
                    sources=["upload", "clipboard"],
                    height=300,
                )
                mood_input = gr.Textbox(
                    label="2. Enter your Mood Vibe",
                    placeholder="e.g., Electric, Cozy Sunday, Cinematic Villain",
                    lines=1,
                )
                submit_button = gr.Button(SUBMIT_LABEL, variant="primary")

            with gr.Column(scale=2):
                result_output = gr.HTML(value=render(FormState.idle()))

        submit_event_args = dict(
            fn=generate_palette,
            inputs=[image_input, mood_input],
            outputs=[result_output, submit_button, image_input, mood_input],
        )
        submit_button.click(**submit_event_args)
        mood_input.submit(**submit_event_args)

    return app, CUSTOM_CSS


def main():
    """Main entry point for the application."""
    logger.info("Starting Chromatica Gradio client...")
    logger.info("Palette API: %s", config.api_base_url)

    app, custom_css = create_ui()

    app.launch(
        server_name=config.ui_server_name,
        server_port=config.ui_server_port,
        show_error=True,
        css=custom_css,
    )


if __name__ == "__main__":
    main()
