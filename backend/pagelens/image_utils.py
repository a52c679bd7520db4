"""Screenshot encoding for reports: PNG as captured, or a smaller JPEG."""
from PIL import Image
import io
import base64


def compress_screenshot(png_bytes: bytes, max_width: int = 1280, quality: int = 75) -> bytes:
    """
    Downscale a full-page capture to `max_width` and re-encode as JPEG.
    Heatmap points are page fractions, so they stay aligned after resizing.
    """
    img = Image.open(io.BytesIO(png_bytes))

    w, h = img.size
    if w > max_width:
        img = img.resize((max_width, max(1, round(h * max_width / w))), Image.LANCZOS)

    # JPEG has no alpha; flatten onto white
    if img.mode in ('RGBA', 'LA', 'P'):
        rgba = img.convert('RGBA')
        img = Image.new('RGB', rgba.size, (255, 255, 255))
        img.paste(rgba, mask=rgba.getchannel('A'))
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    out = io.BytesIO()
    img.save(out, format='JPEG', quality=quality, optimize=True)
    return out.getvalue()


def to_data_uri(screenshot: bytes, compress: bool = False,
                max_width: int = 1280, quality: int = 75) -> str:
    """`data:<mime>;base64,...` for embedding in a report. No bytes gives ''."""
    if not screenshot:
        return ""
    if compress:
        payload, mime = compress_screenshot(screenshot, max_width, quality), "image/jpeg"
    else:
        payload, mime = screenshot, "image/png"
    return f"data:{mime};base64,{base64.b64encode(payload).decode()}"
