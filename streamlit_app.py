"""
PNG2CGA - Web Preview

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import numpy as np
import streamlit as st
from PIL import Image, ImageOps

from png2cga.config import ConvertConfig
from png2cga.dithering import dither_image
from png2cga.image_io import format_rows, preview_size
from png2cga.palette import CgaColor, Palette

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="PNG2CGA",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = ConvertConfig()

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp { background-color: #faf9f6; color: #2a2a2a; }
    .block-container { max-width: 1000px; padding-top: 3rem; }
    .gallery-title {
        font-size: 2.4rem;
        font-weight: 300;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        margin-bottom: 0.5rem;
    }
    .gallery-subtitle { font-size: 0.75rem; line-height: 1.8; margin-bottom: 2rem; }
    .label-detail { font-size: 0.75rem; text-align: center; color: #6a6a6a; }
    .swatch { width: 100%; height: 18px; border: 1px solid #e0ded8; }
    #MainMenu, footer, header {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _framed(img: Image.Image, border: int = 12) -> Image.Image:
    """Pad *img* with a light mat and a hairline edge."""
    framed = ImageOps.expand(img, border=1, fill=(224, 222, 216))
    return ImageOps.expand(framed, border=border - 1, fill=(250, 249, 246))


def _hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02X}{:02X}{:02X}".format(*rgb)


# -- Title -------------------------------------------------------------
st.markdown('<div class="gallery-title">PNG2CGA</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="gallery-subtitle">'
    "Upload an image and it is reduced to the eight colours of the 3-bit RGB "
    "cube. Every pixel is matched to its nearest palette colour in CIELAB "
    "space while Floyd-Steinberg error diffusion carries the rounding error "
    "forward to the pixels not yet visited. Download the result as .cga text "
    "(one digit per pixel) or as an upscaled PNG."
    "</div>",
    unsafe_allow_html=True,
)

upscale = st.slider("Upscale", 1, 20, _DEFAULTS.pixel_upscale)

st.markdown("---")

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader(
    "Select image", type=["png", "jpg", "jpeg", "bmp", "gif", "webp"],
)

if uploaded is not None:
    original = Image.open(io.BytesIO(uploaded.getvalue())).convert("RGB")
    w, h = original.size
    image = np.array(original, dtype=np.uint8)

    if st.button("CONVERT", type="primary", use_container_width=True):
        t0 = time.perf_counter()
        with st.spinner("Dithering ..."):
            result, dithered = dither_image(image, Palette.default())
        elapsed = time.perf_counter() - t0

        size = preview_size(w, h, upscale, _DEFAULTS.max_preview_side)
        preview = Image.fromarray(dithered).resize(size, Image.NEAREST)

        col1, col2 = st.columns(2)
        with col1:
            st.image(
                _framed(original.resize(size, Image.NEAREST)),
                use_container_width=True,
            )
            st.markdown('<div class="label-detail">Source</div>', unsafe_allow_html=True)
        with col2:
            st.image(_framed(preview), use_container_width=True)
            st.markdown(
                f'<div class="label-detail">CGA {w} &times; {h}</div>',
                unsafe_allow_html=True,
            )

        m1, m2 = st.columns(2)
        m1.metric("Resolution", f"{w} × {h}")
        m2.metric("Time", f"{elapsed:.1f} s")

        # Histogram
        cols = st.columns(len(CgaColor))
        for col, (colour, count) in zip(cols, result.counts().items(), strict=False):
            with col:
                st.markdown(
                    f'<div class="swatch" style="background:{_hex(colour.rgb)};"></div>',
                    unsafe_allow_html=True,
                )
                st.metric(f"{colour.code} {colour.label}", f"{count:,}")

        cga_text = "".join(
            row + "\n" for row in format_rows(result.indices, _DEFAULTS.row_terminator)
        )
        buf = io.BytesIO()
        preview.save(buf, format="PNG")

        dl1, dl2 = st.columns(2)
        with dl1:
            st.download_button(
                "SAVE .CGA",
                data=cga_text.encode("ascii"),
                file_name=f"{uploaded.name.rsplit('.', 1)[0]}{_DEFAULTS.output_suffix}",
                mime="text/plain",
                use_container_width=True,
            )
        with dl2:
            st.download_button(
                "SAVE PNG",
                data=buf.getvalue(),
                file_name="cga_preview.png",
                mime="image/png",
                use_container_width=True,
            )
