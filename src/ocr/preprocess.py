from __future__ import annotations

import io
import logging

from contracts.pipeline import PreprocessOutput, StageError, StageResult

from .config import PreprocessConfig

logger = logging.getLogger(__name__)


def _require_pil():
    try:
        from PIL import Image, ImageEnhance, ImageFilter, ImageOps

        return Image, ImageEnhance, ImageFilter, ImageOps
    except ImportError as e:
        raise RuntimeError("Missing dependency: Pillow is required for Stage 1 preprocessing.") from e


class ImagePreprocessor:
    """
    Stage 1: enhance a rendered page image before recognition.

    Never blocks the pipeline: any failure yields the original image bytes.
    """

    def __init__(self, config: PreprocessConfig | None = None) -> None:
        self.config = config or PreprocessConfig()

    def run(self, image: bytes) -> StageResult[PreprocessOutput]:
        logger.info("Stage 1: preprocessing image (%d bytes)", len(image))
        try:
            Image, ImageEnhance, ImageFilter, ImageOps = _require_pil()
        except RuntimeError as e:
            logger.warning("Stage 1 fallback: %s", e)
            return self._fallback(image, StageError(code="PREPROCESS_DEPENDENCY_MISSING", message=str(e)))

        cfg = self.config
        try:
            with Image.open(io.BytesIO(image)) as src:
                fmt = src.format or "PNG"
                if src.mode in ("RGBA", "LA", "PA") or (src.mode == "P" and "transparency" in src.info):
                    # Transparent pixels carry arbitrary (usually black) color; flatten onto white paper.
                    rgba = src.convert("RGBA")
                    img = Image.new("RGB", rgba.size, "white")
                    img.paste(rgba, mask=rgba.getchannel("A"))
                elif src.mode not in ("RGB", "L"):
                    # Enhancers need a concrete band layout; palette/CMYK etc. go through RGB.
                    img = src.convert("RGB")
                else:
                    img = src.copy()

            img = ImageEnhance.Contrast(img).enhance(1.0 + cfg.contrast)
            img = ImageEnhance.Brightness(img).enhance(1.0 + cfg.brightness)
            if cfg.blur_radius > 0:
                img = img.filter(ImageFilter.GaussianBlur(radius=cfg.blur_radius))
            if cfg.normalize:
                img = ImageOps.autocontrast(img)
            if cfg.grayscale:
                img = img.convert("L")

            out = io.BytesIO()
            img.save(out, format=fmt)
        except Exception as e:
            logger.warning("Stage 1 fallback: using original image (%r)", e)
            return self._fallback(
                image,
                StageError(
                    code="PREPROCESS_FAILED",
                    message="Failed to decode, enhance or re-encode the page image",
                    detail={"error": repr(e)},
                ),
            )

        processed = out.getvalue()
        logger.info("Stage 1 complete: image preprocessed (%s, %dx%d)", fmt, img.width, img.height)
        return StageResult(
            success=True,
            data=PreprocessOutput(processed_image=processed, image_format=fmt),
            message="Stage 1 complete: image preprocessed with enhanced contrast and noise reduction",
            metadata={
                "image_format": fmt,
                "width_px": img.width,
                "height_px": img.height,
                "input_bytes": len(image),
                "output_bytes": len(processed),
            },
        )

    def _fallback(self, image: bytes, error: StageError) -> StageResult[PreprocessOutput]:
        return StageResult(
            success=False,
            data=PreprocessOutput(processed_image=image, image_format=None),
            message=f"Stage 1 fallback: using original image ({error.message})",
            error=error,
        )
